"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m airdrop_cli generate --recipient 0x.. [--amount N] [--out PATH]
    python -m airdrop_cli build [--input PATH] [--out PATH] [--json]
    python -m airdrop_cli verify <bundle_path> [--root 0x..] [--json] [--debug]
    python -m airdrop_cli sign --amount N [--account 0x..] [--private-key 0x..]
    python -m airdrop_cli claim <bundle_path> --requests claims.json [--json]
    python -m airdrop_cli config --init

Environment Variables:
    AIRDROP_CHAIN_ID              EIP-712 chain id (default: 31337)
    AIRDROP_VERIFYING_CONTRACT    EIP-712 verifying contract
    AIRDROP_TOKEN_ADDRESS         Token being distributed
    AIRDROP_INPUT_PATH            Builder input document
    AIRDROP_OUTPUT_PATH           Builder proof bundle output
    AIRDROP_PRIVATE_KEY           Key used by the sign command
    AIRDROP_LOG_LEVEL             Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from airdrop_cli import __version__
from airdrop_cli.commands import build, claim, generate, sign, verify
from airdrop_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="airdrop",
        description="Merkle airdrop CLI - Build commitments, verify proof bundles, sign and replay claims.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./airdrop.json or ~/.config/airdrop/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Write an entitlement input document",
        description="Give every recipient the same amount and write the builder's input document.",
    )
    generate_parser.add_argument(
        "--recipient",
        action="append",
        default=None,
        help="Recipient address (repeatable)",
    )
    generate_parser.add_argument(
        "--recipients-file",
        type=str,
        default=None,
        help="File with one address per line",
    )
    generate_parser.add_argument(
        "--amount",
        type=str,
        default=None,
        help="Amount per recipient in base units (default: from config)",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path (default: build.input_path from config)",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build the commitment and proof bundle",
        description="Compute the Merkle root of an entitlement document and write one proof per record.",
    )
    build_parser.add_argument(
        "--input", "-i",
        type=str,
        default=None,
        help="Entitlement document (default: build.input_path from config)",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Proof bundle path (default: build.output_path from config)",
    )
    build_parser.add_argument(
        "--allow-duplicates",
        action="store_true",
        default=False,
        help="Accept repeated recipients",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof bundle offline",
        description="Recompute every leaf and fold every proof against the bundle root.",
    )
    verify_parser.add_argument(
        "bundle_path",
        type=str,
        help="Path to proof bundle JSON",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Expected root (default: root named by the first entry)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks in output",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- sign command ---
    sign_parser = subparsers.add_parser(
        "sign",
        help="Sign a claim message",
        description="Produce the EIP-712 claim signature for (account, amount).",
    )
    sign_parser.add_argument(
        "--amount",
        type=str,
        required=True,
        help="Amount in base units",
    )
    sign_parser.add_argument(
        "--account",
        type=str,
        default=None,
        help="Claimer address (default: the signer's address)",
    )
    sign_parser.add_argument(
        "--private-key",
        type=str,
        default=None,
        help=f"Hex private key (default: ${sign.PRIVATE_KEY_ENV})",
    )
    sign_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    sign_parser.set_defaults(func=sign.sign_cmd)

    # --- claim command ---
    claim_parser = subparsers.add_parser(
        "claim",
        help="Replay claim requests against a local authority",
        description="Process claim requests in order against an in-memory claim authority.",
    )
    claim_parser.add_argument(
        "bundle_path",
        type=str,
        help="Path to proof bundle JSON",
    )
    claim_parser.add_argument(
        "--requests", "-r",
        type=str,
        required=True,
        help="JSON file with one claim request or an array of them",
    )
    claim_parser.add_argument(
        "--unfunded",
        action="store_true",
        default=False,
        help="Do not fund the local token (every payout fails)",
    )
    claim_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    claim_parser.set_defaults(func=claim.claim_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Create or show configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="airdrop.json",
        help="Config file path (default: airdrop.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (AIRDROP_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = args.cli_config
        config_dict = config.runtime.to_dict()
        config_dict["log_level"] = config.log_level
        config_dict["log_file"] = config.log_file
        config_dict["default_output_format"] = config.default_output_format
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: airdrop config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification or claim failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
