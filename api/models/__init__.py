"""API request and response models."""

from api.models.requests import ProofVerifyRequest
from api.models.responses import (
    HealthResponse,
    DomainInfo,
    AirdropInfoResponse,
    ClaimStatusResponse,
    ClaimEventInfo,
    ClaimResponse,
    ProofVerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "ProofVerifyRequest",
    "HealthResponse",
    "DomainInfo",
    "AirdropInfoResponse",
    "ClaimStatusResponse",
    "ClaimEventInfo",
    "ClaimResponse",
    "ProofVerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
