"""
Module 09D - API Response Models

Pydantic models for API response serialization.

Amounts are rendered as decimal strings so 256-bit values survive
JSON clients that parse numbers as doubles.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-airdrop-api"
    version: str = "v1"


class DomainInfo(BaseModel):
    """EIP-712 signing domain of the served airdrop."""

    name: str
    version: str
    chain_id: int
    verifying_contract: str
    separator: str = Field(..., description="Domain separator (0x hex)")


class AirdropInfoResponse(BaseModel):
    """Response for GET /airdrop endpoint."""

    ok: bool = True
    merkle_root: str = Field(..., description="Published commitment")
    token_address: str
    domain: DomainInfo
    proof_depth: int | None = Field(default=None, description="Required proof length, if enforced")
    claims: int = Field(default=0, description="Number of successful claims so far")


class ClaimStatusResponse(BaseModel):
    """Response for GET /claims/{address} endpoint."""

    ok: bool = True
    address: str
    claimed: bool
    message_hash: str | None = Field(
        default=None,
        description="Digest to sign for the queried amount, when one was given",
    )


class ClaimEventInfo(BaseModel):
    """Claim notification as rendered by the API."""

    sequence: int
    claimer: str
    amount: str
    merkle_root: str


class ClaimResponse(BaseModel):
    """Response for POST /claim endpoint."""

    ok: bool = True
    claimer: str
    amount: str
    event: ClaimEventInfo


class ProofVerifyResponse(BaseModel):
    """Response for POST /proofs/verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof reaches the root")
    leaf: str = Field(..., description="Recomputed leaf digest")
    computed_root: str | None = Field(default=None, description="Root implied by the proof")
    root: str = Field(..., description="Root the proof was checked against")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = False


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
