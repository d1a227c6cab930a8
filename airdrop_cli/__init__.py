"""
Module 09C - Airdrop CLI

Command-line interface for building and exercising Merkle airdrops.

Usage:
    python -m airdrop_cli generate --recipient 0x.. --recipient 0x.. --out input.json
    python -m airdrop_cli build --input input.json --out output.json
    python -m airdrop_cli verify output.json
    python -m airdrop_cli sign --amount 25000000000000000000
    python -m airdrop_cli claim output.json --requests claims.json
"""

__version__ = "0.1.0"
