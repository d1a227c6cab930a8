"""
Module 09C - CLI Verify Command

Re-verify a published proof bundle offline.

Usage:
    airdrop verify target/output.json [--root 0x..] [--json] [--debug]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any

from core.crypto.hashing import digest_from_hex
from core.merkle.builder import load_proof_bundle, verify_proof_bundle
from core.schemas.errors import InputException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of bundle verification for CLI output."""
    bundle_path: str = ""
    merkle_root: str = ""
    entries: int = 0
    ok: bool = False
    failed_indices: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    checks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self, include_checks: bool = False) -> dict[str, Any]:
        d = asdict(self)
        if not include_checks:
            del d["checks"]
        return d


def print_summary_human(summary: VerifySummary, debug: bool = False) -> None:
    """Print summary in human-readable format."""
    print(f"bundle: {summary.bundle_path}")
    print(f"merkle_root: {summary.merkle_root}")
    print(f"entries: {summary.entries}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.warnings:
        print(f"\nwarnings ({len(summary.warnings)}):")
        for warning in summary.warnings[:10]:
            print(f"  ! {warning}")

    if debug and summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        failed = len(summary.checks) - passed
        print(f"\nchecks: {passed} passed, {failed} failed")
        for check in summary.checks[:20]:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}: {check['message']}")


def print_summary_json(summary: VerifySummary, debug: bool = False) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(include_checks=debug), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if any entry fails)
    """
    bundle_path = Path(args.bundle_path)
    output_json = args.json
    debug = args.debug

    if not bundle_path.exists():
        print(f"Error: Proof bundle not found: {bundle_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        entries = load_proof_bundle(bundle_path)
        expected_root = digest_from_hex(args.root) if args.root else None
    except (InputException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = verify_proof_bundle(entries, root=expected_root)

    summary = VerifySummary(
        bundle_path=str(bundle_path),
        merkle_root=args.root or (entries[0].root if entries else ""),
        entries=len(entries),
        ok=result.ok,
        failed_indices=list(result.failed_indices),
        errors=result.get_error_messages(),
        warnings=[c.message for c in result.checks if c.is_warning],
        checks=[c.model_dump() for c in result.checks],
    )

    if output_json:
        print_summary_json(summary, debug=debug)
    else:
        print_summary_human(summary, debug=debug)

    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
