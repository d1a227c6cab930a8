"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the airdrop subsystem.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the subsystem."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Build-time Errors
    INPUT_ERROR = "INPUT_ERROR"

    # Claim Errors
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_PROOF = "INVALID_PROOF"
    PAYOUT_FAILURE = "PAYOUT_FAILURE"
    REENTRANT_CLAIM = "REENTRANT_CLAIM"

    # Verification Errors
    ROOT_MISMATCH = "ROOT_MISMATCH"
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AirdropError(BaseModel):
    """
    Base error model for structured error communication.

    This model is used for passing errors between modules without exceptions,
    enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "AirdropException":
        """Convert this error model to a raised exception."""
        return AirdropException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AirdropException(Exception):
    """
    Base exception for all airdrop errors.

    This exception carries structured error information and can be
    converted to/from AirdropError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "AIRDROP_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AirdropError:
        """Convert this exception to an AirdropError model."""
        return AirdropError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(AirdropException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class InputException(AirdropException):
    """
    Raised when an entitlement list or record is malformed.

    The builder aborts the whole build on this error; no partial
    artifact is produced.
    """

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INPUT_ERROR,
            details=full_details,
            retryable=False,
        )


class ClaimException(AirdropException):
    """Base for the named claim outcomes. Always carries the claimer."""

    def __init__(
        self,
        message: str,
        code: str,
        claimer: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        full_details = details or {}
        if claimer:
            full_details["claimer"] = claimer
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=retryable,
        )
        self.claimer = claimer


class AlreadyClaimedException(ClaimException):
    """The address has already consumed its one-shot eligibility."""

    def __init__(self, claimer: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"Address {claimer} has already claimed",
            code=ErrorCodes.ALREADY_CLAIMED,
            claimer=claimer,
            details=details,
        )


class InvalidSignatureException(ClaimException):
    """Recovered signer does not match the claimer, or the signature is malformed."""

    def __init__(
        self,
        claimer: str,
        recovered: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["recovered"] = recovered
        super().__init__(
            message=f"Invalid signature for {claimer}",
            code=ErrorCodes.INVALID_SIGNATURE,
            claimer=claimer,
            details=full_details,
        )


class InvalidProofException(ClaimException):
    """Recomputed root does not match the published root."""

    def __init__(self, claimer: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"Merkle proof does not verify for {claimer}",
            code=ErrorCodes.INVALID_PROOF,
            claimer=claimer,
            details=details,
        )


class PayoutFailureException(ClaimException):
    """The token collaborator declined the transfer; state was rolled back."""

    def __init__(
        self,
        claimer: str,
        amount: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["amount"] = str(amount)
        super().__init__(
            message=f"Token transfer of {amount} to {claimer} failed",
            code=ErrorCodes.PAYOUT_FAILURE,
            claimer=claimer,
            details=full_details,
            retryable=True,
        )


class ReentrantClaimException(ClaimException):
    """A claim was started while another claim's payout was in flight."""

    def __init__(self, claimer: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=f"Claim for {claimer} rejected: another payout is in progress",
            code=ErrorCodes.REENTRANT_CLAIM,
            claimer=claimer,
            details=details,
        )
