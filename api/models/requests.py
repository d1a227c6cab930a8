"""
Module 09D - API Request Models

Pydantic models for API request validation.

POST /claim takes core.airdrop.models.ClaimRequest directly.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.codec import normalize_address
from core.crypto.hashing import digest_from_hex
from core.merkle.entitlement import parse_amount
from core.schemas.errors import InputException


class ProofVerifyRequest(BaseModel):
    """Request body for POST /proofs/verify."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    account: str = Field(..., description="Recipient address")
    amount: int = Field(..., description="Entitlement in base units (decimal string or integer)")
    merkle_proof: list[str] = Field(
        default_factory=list,
        alias="merkleProof",
        description="Sibling digests, bottom-up",
    )
    root: str | None = Field(
        default=None,
        description="Root to verify against (default: the served airdrop's root)",
    )

    @field_validator("account", mode="before")
    @classmethod
    def _check_account(cls, value: Any) -> str:
        try:
            return normalize_address(value, field_path="account")
        except InputException as e:
            raise ValueError(e.message) from e

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> int:
        try:
            return parse_amount(value, field_path="amount")
        except InputException as e:
            raise ValueError(e.message) from e

    @field_validator("merkle_proof")
    @classmethod
    def _check_proof(cls, value: list[str]) -> list[str]:
        for item in value:
            digest_from_hex(item)
        return value

    @field_validator("root")
    @classmethod
    def _check_root(cls, value: str | None) -> str | None:
        if value is not None:
            digest_from_hex(value)
        return value

    @property
    def proof_bytes(self) -> list[bytes]:
        return [digest_from_hex(item) for item in self.merkle_proof]
