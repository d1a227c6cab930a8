"""
Common test fixtures shared by all modules.

Provides deterministic keys, addresses and entitlement records. Keys are
derived as keccak256(label) so every run signs with the same accounts.
"""

from typing import Optional, Sequence

from eth_utils import keccak

from core.crypto.signatures import EIP712Domain, address_of
from core.merkle.entitlement import EntitlementRecord, make_entitlement_list


# Amount used by the four-recipient scenario (25 tokens with 18 decimals)
SCENARIO_AMOUNT = 25 * 10**18

CHAIN_ID = 31337
VERIFYING_CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TOKEN_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"


# =============================================================================
# Keys and addresses
# =============================================================================

def make_private_key(label: str) -> bytes:
    """Deterministic 32-byte private key for a label."""
    return keccak(text=label)


def make_account(label: str) -> tuple[bytes, str]:
    """(private_key, checksummed address) for a label."""
    key = make_private_key(label)
    return key, address_of(key)


def make_accounts(count: int, prefix: str = "recipient") -> list[tuple[bytes, str]]:
    return [make_account(f"{prefix}-{i}") for i in range(count)]


# =============================================================================
# Records
# =============================================================================

def make_records(
    count: int = 4,
    amount: int = SCENARIO_AMOUNT,
    addresses: Optional[Sequence[str]] = None,
) -> list[EntitlementRecord]:
    """
    Create entitlement records for testing.

    Args:
        count: Number of records (ignored when addresses is given)
        amount: Amount per record
        addresses: Explicit recipients; defaults to make_accounts(count)
    """
    if addresses is None:
        addresses = [address for _, address in make_accounts(count)]
    return [EntitlementRecord(recipient=a, amount=amount) for a in addresses]


def make_input_document(count: int = 4, amount: int = SCENARIO_AMOUNT) -> dict:
    """Raw entitlement document as read from input.json."""
    addresses = [address for _, address in make_accounts(count)]
    return make_entitlement_list(addresses, amount).model_dump()


def make_domain(
    chain_id: int = CHAIN_ID,
    verifying_contract: str = VERIFYING_CONTRACT,
) -> EIP712Domain:
    return EIP712Domain(chain_id=chain_id, verifying_contract=verifying_contract)
