"""
Test fixtures package for airdrop tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Deterministic keys, addresses, records and domain
- airdrop_fixtures.py: Funded airdrops, signed claim requests and token doubles (M04)

Usage:
    from fixtures import make_airdrop, make_claim_request

    def test_something():
        setup = make_airdrop(count=4)
        receipt = setup.authority.claim_request(make_claim_request(setup, 0))
"""

from .common import (
    SCENARIO_AMOUNT,
    CHAIN_ID,
    VERIFYING_CONTRACT,
    TOKEN_ADDRESS,
    make_private_key,
    make_account,
    make_accounts,
    make_records,
    make_input_document,
    make_domain,
)

from .airdrop_fixtures import (
    AirdropSetup,
    make_config,
    make_airdrop,
    make_claim_request,
    DecliningToken,
    RaisingToken,
    ReentrantToken,
)

__all__ = [
    # Common
    "SCENARIO_AMOUNT",
    "CHAIN_ID",
    "VERIFYING_CONTRACT",
    "TOKEN_ADDRESS",
    "make_private_key",
    "make_account",
    "make_accounts",
    "make_records",
    "make_input_document",
    "make_domain",
    # Airdrop
    "AirdropSetup",
    "make_config",
    "make_airdrop",
    "make_claim_request",
    "DecliningToken",
    "RaisingToken",
    "ReentrantToken",
]
