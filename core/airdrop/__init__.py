"""
Module 04 - Airdrop Claims

The claim-authorization state machine and its collaborators:
- ClaimAuthority: ordered guards, write-once claimed flags, atomic payout
- ClaimLedger: explicit claimed-flag store
- TokenLike / InMemoryToken: payout collaborator
- build_local_authority: authority for a proof bundle over an in-memory token
- AirdropConfig / ClaimRequest / ClaimEvent / ClaimReceipt schemas
"""
from .models import (
    DomainSpec,
    AirdropConfig,
    ClaimRequest,
    ClaimEvent,
    ClaimReceipt,
)
from .ledger import ClaimLedger
from .token import TokenLike, InMemoryToken
from .authority import ClaimAuthority, ClaimContext, ClaimGuard, ClaimListener
from .local import build_local_authority

__all__ = [
    "DomainSpec",
    "AirdropConfig",
    "ClaimRequest",
    "ClaimEvent",
    "ClaimReceipt",
    "ClaimLedger",
    "TokenLike",
    "InMemoryToken",
    "ClaimAuthority",
    "ClaimContext",
    "ClaimGuard",
    "ClaimListener",
    "build_local_authority",
]
