"""
Module 09D - Claim Routes

The claim entry point and read-only views of the served airdrop.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_authority
from api.errors import InvalidRequestError
from api.models.responses import (
    AirdropInfoResponse,
    ClaimEventInfo,
    ClaimResponse,
    ClaimStatusResponse,
    DomainInfo,
)
from core.airdrop.authority import ClaimAuthority
from core.airdrop.models import ClaimRequest
from core.crypto.codec import normalize_address
from core.crypto.hashing import to_hex
from core.merkle.entitlement import parse_amount
from core.schemas.errors import InputException


logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


@router.get("/airdrop", response_model=AirdropInfoResponse)
async def airdrop_info(
    authority: ClaimAuthority = Depends(get_authority),
) -> AirdropInfoResponse:
    """Published root, token and signing domain of the served airdrop."""
    config = authority.config
    return AirdropInfoResponse(
        merkle_root=config.merkle_root,
        token_address=config.token_address,
        domain=DomainInfo(
            name=config.domain.name,
            version=config.domain.version,
            chain_id=config.domain.chain_id,
            verifying_contract=config.domain.verifying_contract,
            separator=to_hex(authority.domain_separator),
        ),
        proof_depth=config.proof_depth,
        claims=len(authority.events),
    )


@router.get("/claims/{address}", response_model=ClaimStatusResponse)
async def claim_status(
    address: str,
    amount: Optional[str] = Query(
        default=None,
        description="If given, also return the digest this address must sign for amount",
    ),
    authority: ClaimAuthority = Depends(get_authority),
) -> ClaimStatusResponse:
    """Whether address has claimed, and optionally its claim message hash."""
    try:
        normalized = normalize_address(address, field_path="address")
    except InputException as e:
        raise InvalidRequestError(e.message, details=e.details) from e

    message_hash = None
    if amount is not None:
        try:
            value = parse_amount(amount, field_path="amount")
        except InputException as e:
            raise InvalidRequestError(e.message, details=e.details) from e
        message_hash = to_hex(authority.get_message_hash(normalized, value))

    return ClaimStatusResponse(
        address=normalized,
        claimed=authority.has_claimed(normalized),
        message_hash=message_hash,
    )


@router.post("/claim", response_model=ClaimResponse)
def claim(
    request: ClaimRequest,
    authority: ClaimAuthority = Depends(get_authority),
) -> ClaimResponse:
    """
    Claim an entitlement.

    Runs in the threadpool; the authority serialises concurrent claims.
    Failures surface as AirdropException and are rendered by the error
    handlers (409 already claimed, 401 bad signature, 400 bad proof,
    502 payout failure).
    """
    receipt = authority.claim_request(request)
    event = receipt.event
    return ClaimResponse(
        claimer=receipt.claimer,
        amount=str(receipt.amount),
        event=ClaimEventInfo(
            sequence=event.sequence,
            claimer=event.claimer,
            amount=str(event.amount),
            merkle_root=event.merkle_root,
        ),
    )
