"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the foundation layer: it must not import from core.crypto,
core.merkle or core.airdrop.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    AirdropError,
    AirdropException,
    AlreadyClaimedException,
    CanonicalizationException,
    ClaimException,
    ErrorCodes,
    InputException,
    InvalidProofException,
    InvalidSignatureException,
    PayoutFailureException,
    ReentrantClaimException,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "AirdropError",
    "AirdropException",
    "AlreadyClaimedException",
    "CanonicalizationException",
    "ClaimException",
    "ErrorCodes",
    "InputException",
    "InvalidProofException",
    "InvalidSignatureException",
    "PayoutFailureException",
    "ReentrantClaimException",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
