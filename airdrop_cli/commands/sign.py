"""
Module 09C - CLI Sign Command

Sign a claim message for the configured signing domain.

Usage:
    airdrop sign --amount 25000000000000000000 [--account 0x..] [--private-key 0x..]

The key may also come from AIRDROP_PRIVATE_KEY. It is never logged.
"""

from __future__ import annotations

import json
import os
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Any

from core.crypto.codec import normalize_address
from core.crypto.hashing import from_hex, to_hex
from core.crypto.signatures import EIP712Domain, address_of, claim_digest, sign_digest
from core.merkle.entitlement import parse_amount
from core.schemas.errors import InputException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

PRIVATE_KEY_ENV = "AIRDROP_PRIVATE_KEY"


@dataclass
class SignSummary:
    """Signature produced for one (account, amount) pair."""
    signer: str = ""
    account: str = ""
    amount: str = ""
    digest: str = ""
    v: int = 0
    r: str = ""
    s: str = ""
    signature: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _load_private_key(value: str | None) -> bytes:
    raw = value or os.getenv(PRIVATE_KEY_ENV)
    if not raw:
        raise InputException(
            f"No private key given (use --private-key or {PRIVATE_KEY_ENV})",
            field_path="private_key",
        )
    if not raw.startswith("0x"):
        raw = "0x" + raw
    try:
        key = from_hex(raw)
    except ValueError as e:
        raise InputException("Private key is not valid hex", field_path="private_key") from e
    if len(key) != 32:
        raise InputException(
            f"Private key must be 32 bytes, got {len(key)}",
            field_path="private_key",
        )
    return key


def sign_cmd(args: Namespace) -> int:
    """Execute the sign command."""
    domain_config = args.cli_config.runtime.domain

    try:
        private_key = _load_private_key(args.private_key)
        signer = address_of(private_key)
        account = normalize_address(args.account, field_path="account") if args.account else signer
        amount = parse_amount(args.amount, field_path="amount")
        domain = EIP712Domain(
            chain_id=domain_config.chain_id,
            verifying_contract=domain_config.verifying_contract,
            name=domain_config.name,
            version=domain_config.version,
        )
        digest = claim_digest(domain, account, amount)
    except InputException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    signature = sign_digest(private_key, digest)
    summary = SignSummary(
        signer=signer,
        account=account,
        amount=str(amount),
        digest=to_hex(digest),
        v=signature.v,
        r=hex(signature.r),
        s=hex(signature.s),
        signature=to_hex(signature.to_bytes()),
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return EXIT_SUCCESS

    if signer != account:
        print(f"! signer {signer} is not the claimer; this signature will not authorise a claim")
    for key, value in summary.to_dict().items():
        print(f"{key}: {value}")
    return EXIT_SUCCESS
