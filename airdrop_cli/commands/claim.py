"""
Module 09C - CLI Claim Command

Replay a batch of claim requests against a local claim authority.

The authority is built from the proof bundle's root and the configured
domain. Its token is an in-memory ledger funded with the bundle total,
held by the verifying contract.

Usage:
    airdrop claim target/output.json --requests claims.json [--json]

claims.json is a JSON array of claim requests:
    [{"claimer": "0x..", "amount": "25000000000000000000",
      "merkleProof": ["0x..", ...], "v": 27, "r": "0x..", "s": "0x.."}]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.airdrop.authority import ClaimAuthority
from core.airdrop.local import build_local_authority
from core.airdrop.models import ClaimRequest
from core.airdrop.token import InMemoryToken
from core.schemas.errors import AirdropException, ErrorCodes, InputException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CLAIM_FAILED = 2


@dataclass
class ClaimOutcome:
    """Result of one request in the batch."""
    index: int
    ok: bool
    claimer: str | None = None
    amount: str | None = None
    code: str | None = None
    message: str | None = None


@dataclass
class ClaimSummary:
    """Summary of a claim batch for CLI output."""
    bundle_path: str = ""
    merkle_root: str = ""
    succeeded: int = 0
    failed: int = 0
    outcomes: list[ClaimOutcome] = field(default_factory=list)
    balances: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _load_requests(path: Path) -> list[Any]:
    if not path.exists():
        raise FileNotFoundError(f"Requests file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputException(f"Requests file is not valid JSON: {e}") from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise InputException("Requests file must contain a JSON array")
    return data


def _run_request(authority: ClaimAuthority, index: int, raw: Any) -> ClaimOutcome:
    try:
        request = ClaimRequest.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        return ClaimOutcome(
            index=index,
            ok=False,
            code=ErrorCodes.INPUT_ERROR,
            message=f"{'.'.join(str(p) for p in first.get('loc', ()))}: {first.get('msg')}",
        )

    try:
        receipt = authority.claim_request(request)
    except AirdropException as e:
        return ClaimOutcome(
            index=index,
            ok=False,
            claimer=request.claimer,
            amount=str(request.amount),
            code=e.code,
            message=e.message,
        )
    return ClaimOutcome(
        index=index,
        ok=True,
        claimer=receipt.claimer,
        amount=str(receipt.amount),
    )


def print_summary_human(summary: ClaimSummary) -> None:
    """Print summary in human-readable format."""
    print(f"bundle: {summary.bundle_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"claims: {summary.succeeded} succeeded, {summary.failed} failed")
    for outcome in summary.outcomes:
        if outcome.ok:
            print(f"  ✓ [{outcome.index}] {outcome.claimer} received {outcome.amount}")
        else:
            print(f"  ✗ [{outcome.index}] {outcome.code}: {outcome.message}")
    if summary.balances:
        print("\nbalances:")
        for address, balance in summary.balances.items():
            print(f"  {address}: {balance}")


def claim_cmd(args: Namespace) -> int:
    """
    Execute the claim command.

    Requests are processed in file order against one authority, so a
    repeated claim in the batch fails as already claimed.

    Returns:
        Exit code (2 if any request failed)
    """
    runtime = args.cli_config.runtime
    bundle_path = Path(args.bundle_path)

    try:
        authority = build_local_authority(runtime, bundle_path, fund=not args.unfunded)
        requests = _load_requests(Path(args.requests))
    except (FileNotFoundError, InputException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = ClaimSummary(
        bundle_path=str(bundle_path),
        merkle_root=authority.config.merkle_root,
    )
    for i, raw in enumerate(requests):
        outcome = _run_request(authority, i, raw)
        summary.outcomes.append(outcome)
        if outcome.ok:
            summary.succeeded += 1
        else:
            summary.failed += 1

    token = authority.token
    if isinstance(token, InMemoryToken):
        summary.balances = {
            outcome.claimer: str(token.balance_of(outcome.claimer))
            for outcome in summary.outcomes
            if outcome.claimer
        }

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.failed == 0 else EXIT_CLAIM_FAILED
