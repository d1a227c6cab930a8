"""
Module 09D - Proof Verification Route

Stateless membership check; never mutates the served airdrop.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from api.deps import get_optional_authority
from api.errors import NotConfiguredError
from api.models.requests import ProofVerifyRequest
from api.models.responses import ProofVerifyResponse
from core.airdrop.authority import ClaimAuthority
from core.crypto.hashing import digest_from_hex, to_hex
from core.merkle.merkle_tree import leaf_hash, process_proof


router = APIRouter(prefix="/proofs", tags=["verification"])


@router.post("/verify", response_model=ProofVerifyResponse)
def verify_proof(
    request: ProofVerifyRequest,
    authority: Optional[ClaimAuthority] = Depends(get_optional_authority),
) -> ProofVerifyResponse:
    """
    Check that (account, amount) folds with merkleProof to a root.

    The root defaults to the served airdrop's root, so an explicit root
    works without a configured airdrop. An invalid proof is a 200
    response with valid=false; only malformed input is an error.
    """
    if request.root:
        root = digest_from_hex(request.root)
    elif authority is not None:
        root = authority.merkle_root
    else:
        raise NotConfiguredError("No root given and no airdrop configured")

    leaf = leaf_hash(request.account, request.amount)
    computed = process_proof(leaf, request.proof_bytes)
    return ProofVerifyResponse(
        valid=computed is not None and computed == root,
        leaf=to_hex(leaf),
        computed_root=to_hex(computed) if computed is not None else None,
        root=to_hex(root),
    )
