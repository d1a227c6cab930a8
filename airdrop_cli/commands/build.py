"""
Module 09C - CLI Build Command

Build the commitment for an entitlement document and write the proof bundle.

Usage:
    airdrop build [--input target/input.json] [--out target/output.json] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from core.crypto.hashing import to_hex
from core.merkle.builder import (
    build_entitlement_tree,
    load_entitlement_file,
    save_proof_bundle,
)
from core.schemas.errors import InputException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class BuildSummary:
    """Summary of a build for CLI output."""
    input_path: str = ""
    output_path: str = ""
    merkle_root: str = ""
    count: int = 0
    depth: int = 0
    total_amount: str = ""
    success: bool = False
    error: str | None = None
    field_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        for key in ("error", "field_path"):
            if d[key] is None:
                del d[key]
        return d


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    if not summary.success:
        location = f" (at {summary.field_path})" if summary.field_path else ""
        print(f"✗ Build failed: {summary.error}{location}", file=sys.stderr)
        return
    print(f"input: {summary.input_path}")
    print(f"output: {summary.output_path}")
    print(f"count: {summary.count}")
    print(f"depth: {summary.depth}")
    print(f"total_amount: {summary.total_amount}")
    print(f"merkle_root: {summary.merkle_root}")


def print_summary_json(summary: BuildSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Nothing is written unless the whole build, including its self-check,
    succeeds.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    build_config = args.cli_config.runtime.build
    input_path = Path(args.input or build_config.input_path)
    output_path = Path(args.out or build_config.output_path)
    allow_duplicates = args.allow_duplicates or build_config.allow_duplicates
    output_json = args.json

    summary = BuildSummary(input_path=str(input_path), output_path=str(output_path))

    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        records = load_entitlement_file(input_path, allow_duplicates=allow_duplicates)
        tree = build_entitlement_tree(records)
    except InputException as e:
        summary.error = e.message
        summary.field_path = e.details.get("field_path")
        if output_json:
            print_summary_json(summary)
        else:
            print_summary_human(summary)
        return EXIT_RUNTIME_ERROR

    save_proof_bundle(tree.to_bundle(), output_path)

    summary.merkle_root = to_hex(tree.root)
    summary.count = len(tree.records)
    summary.depth = tree.depth
    summary.total_amount = str(tree.total_amount)
    summary.success = True

    if output_json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
