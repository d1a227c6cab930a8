"""
Module 04 - Claim Ledger
Write-once per-address claimed flags.

Owner: Protocol Engineer
Module ID: M04

Every address is unclaimed until marked. A mark can be reverted only by
the claim authority, and only within the invocation that set it (the
payout rollback path).
"""
from __future__ import annotations

from typing import Iterator

from core.crypto.codec import normalize_address
from core.schemas.errors import AlreadyClaimedException


class ClaimLedger:
    """Explicit key-value store of claimed flags, keyed by checksummed address."""

    def __init__(self) -> None:
        self._claimed: dict[str, bool] = {}

    def is_claimed(self, address: str) -> bool:
        return self._claimed.get(normalize_address(address), False)

    def mark_claimed(self, address: str) -> None:
        """
        Set the flag for address.

        Raises:
            AlreadyClaimedException: If the flag is already set
        """
        key = normalize_address(address)
        if self._claimed.get(key, False):
            raise AlreadyClaimedException(key)
        self._claimed[key] = True

    def revert_claim(self, address: str) -> None:
        """Clear a flag set earlier in the same claim. Rollback path only."""
        self._claimed.pop(normalize_address(address), None)

    def claimed_addresses(self) -> list[str]:
        return [address for address, flag in self._claimed.items() if flag]

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.is_claimed(address)

    def __iter__(self) -> Iterator[str]:
        return iter(self.claimed_addresses())

    def __len__(self) -> int:
        return len(self.claimed_addresses())
