"""
CLI command modules.
"""

from airdrop_cli.commands import build, claim, generate, sign, verify

__all__ = ["build", "claim", "generate", "sign", "verify"]
