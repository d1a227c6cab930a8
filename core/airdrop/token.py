"""
Module 04 - Token Collaborator
The interface the claim authority pays out through, plus an in-memory
implementation for tests, local simulation and the development API.

Owner: Protocol Engineer
Module ID: M04
"""
from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

from core.crypto.codec import normalize_address, validate_amount
from core.schemas.errors import InputException

logger = logging.getLogger(__name__)


@runtime_checkable
class TokenLike(Protocol):
    """Anything that can pay `amount` from the airdrop's balance to `recipient`."""

    def transfer(self, recipient: str, amount: int) -> bool:
        ...

    def mint(self, recipient: str, amount: int) -> None:
        ...


class InMemoryToken:
    """
    Minimal fungible-token ledger.

    `transfer` moves funds out of the holder's balance (the airdrop
    contract's account) and returns False instead of raising when the
    holder cannot cover the amount.
    """

    def __init__(
        self,
        holder: str,
        name: str = "Airdrop Token",
        symbol: str = "AIR",
    ):
        self.holder = normalize_address(holder)
        self.name = name
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._total_supply = 0
        self._lock = threading.Lock()

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def mint(self, recipient: str, amount: int) -> None:
        """
        Create `amount` new units for recipient.

        Raises:
            InputException: If recipient or amount is malformed
        """
        key = normalize_address(recipient)
        validate_amount(amount)
        with self._lock:
            self._balances[key] = self._balances.get(key, 0) + amount
            self._total_supply += amount
        logger.debug(f"Minted {amount} {self.symbol} to {key}")

    def transfer(self, recipient: str, amount: int) -> bool:
        try:
            key = normalize_address(recipient)
            validate_amount(amount)
        except InputException as e:
            logger.warning(f"Rejected transfer: {e.message}")
            return False

        with self._lock:
            available = self._balances.get(self.holder, 0)
            if available < amount:
                logger.warning(
                    f"Insufficient {self.symbol} balance: holder has {available}, "
                    f"needs {amount}"
                )
                return False
            self._balances[self.holder] = available - amount
            self._balances[key] = self._balances.get(key, 0) + amount
        return True


__all__ = [
    "TokenLike",
    "InMemoryToken",
]
