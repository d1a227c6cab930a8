"""
Module 09C - CLI Generate Command

Write an entitlement input document giving every recipient the same amount.

Usage:
    airdrop generate --recipient 0x.. --recipient 0x.. --amount 25000000000000000000
    airdrop generate --recipients-file addresses.txt --out target/input.json
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any

from core.merkle.builder import save_json_artifact
from core.merkle.entitlement import make_entitlement_list, parse_amount
from core.schemas.errors import InputException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class GenerateSummary:
    """Summary of input generation for CLI output."""
    output_path: str = ""
    count: int = 0
    amount: str = ""
    recipients: list[str] = field(default_factory=list)
    success: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["error"] is None:
            del d["error"]
        return d


def read_recipients_file(path: Path) -> list[str]:
    """One address per line; blank lines and '#' comments are ignored."""
    recipients = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            recipients.append(line)
    return recipients


def generate_cmd(args: Namespace) -> int:
    """Execute the generate command."""
    runtime = args.cli_config.runtime
    output_json = args.json
    out_path = Path(args.out or runtime.build.input_path)
    summary = GenerateSummary(output_path=str(out_path))

    recipients = list(args.recipient or [])
    if args.recipients_file:
        recipients_path = Path(args.recipients_file)
        if not recipients_path.exists():
            print(f"Error: Recipients file not found: {recipients_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        recipients.extend(read_recipients_file(recipients_path))

    if not recipients:
        print("Error: No recipients given (use --recipient or --recipients-file)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        amount = parse_amount(args.amount, field_path="amount") if args.amount is not None \
            else runtime.build.default_amount
        document = make_entitlement_list(recipients, amount)
        # Reject duplicates now rather than at build time
        records = document.to_records(allow_duplicates=runtime.build.allow_duplicates)
    except InputException as e:
        summary.error = e.message
        _print(summary, output_json)
        return EXIT_RUNTIME_ERROR

    save_json_artifact(document.model_dump(), out_path)

    summary.count = len(records)
    summary.amount = str(amount)
    summary.recipients = [r.recipient for r in records]
    summary.success = True
    _print(summary, output_json)
    return EXIT_SUCCESS


def _print(summary: GenerateSummary, output_json: bool) -> None:
    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
        return
    if not summary.success:
        print(f"✗ Generate failed: {summary.error}", file=sys.stderr)
        return
    print(f"✓ Wrote {summary.count} entitlements to {summary.output_path}")
    print(f"amount: {summary.amount}")
