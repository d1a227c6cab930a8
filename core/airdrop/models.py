"""
Module 04 - Airdrop Schemas
Configuration, claim requests and claim notifications.

Owner: Protocol Engineer
Module ID: M04
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.config.runtime import RuntimeConfig
from core.crypto.codec import normalize_address
from core.crypto.hashing import digest_from_hex, to_hex
from core.crypto.signatures import (
    DEFAULT_DOMAIN_NAME,
    DEFAULT_DOMAIN_VERSION,
    EIP712Domain,
    Signature,
    domain_separator,
)
from core.merkle.entitlement import parse_amount
from core.schemas.errors import InputException


def _digest_hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = to_hex(bytes(value))
    digest_from_hex(value)
    return value.lower()


def _address_or_value_error(value: Any) -> str:
    try:
        return normalize_address(value)
    except InputException as e:
        raise ValueError(e.message) from e


class DomainSpec(BaseModel):
    """Serialisable form of the EIP-712 signing domain."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = DEFAULT_DOMAIN_NAME
    version: str = DEFAULT_DOMAIN_VERSION
    chain_id: int = Field(..., ge=0)
    verifying_contract: str

    @field_validator("verifying_contract", mode="before")
    @classmethod
    def _check_contract(cls, value: Any) -> str:
        return _address_or_value_error(value)

    def to_eip712(self) -> EIP712Domain:
        return EIP712Domain(
            chain_id=self.chain_id,
            verifying_contract=self.verifying_contract,
            name=self.name,
            version=self.version,
        )


class AirdropConfig(BaseModel):
    """
    Construction-time configuration of one airdrop. Never mutated.

    Attributes:
        merkle_root: Published commitment (0x hex, 32 bytes)
        token_address: Address of the token being distributed
        domain: EIP-712 signing domain
        proof_depth: Expected proof length; proofs of other lengths fail
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    merkle_root: str
    token_address: str
    domain: DomainSpec
    proof_depth: Optional[int] = Field(default=None, ge=0)

    @field_validator("merkle_root", mode="before")
    @classmethod
    def _check_root(cls, value: Any) -> str:
        return _digest_hex(value)

    @field_validator("token_address", mode="before")
    @classmethod
    def _check_token(cls, value: Any) -> str:
        return _address_or_value_error(value)

    @classmethod
    def from_runtime(
        cls,
        runtime: RuntimeConfig,
        merkle_root: bytes | str,
        proof_depth: Optional[int] = None,
    ) -> "AirdropConfig":
        """Combine a freshly built root with the configured domain and token."""
        return cls(
            merkle_root=merkle_root,
            token_address=runtime.token.address,
            domain=DomainSpec(
                name=runtime.domain.name,
                version=runtime.domain.version,
                chain_id=runtime.domain.chain_id,
                verifying_contract=runtime.domain.verifying_contract,
            ),
            proof_depth=proof_depth,
        )

    @property
    def root_bytes(self) -> bytes:
        return digest_from_hex(self.merkle_root)

    @property
    def domain_separator(self) -> bytes:
        return domain_separator(self.domain.to_eip712())


class ClaimRequest(BaseModel):
    """
    Parameter bundle of the claim entry point.

    Amount and the r/s components accept JSON integers or strings
    (decimal for amount, decimal or 0x hex for r and s) so large values
    survive clients that cannot represent 256-bit integers.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    claimer: str
    amount: int
    merkle_proof: list[str] = Field(default_factory=list, alias="merkleProof")
    v: int
    r: int
    s: int

    @field_validator("claimer", mode="before")
    @classmethod
    def _check_claimer(cls, value: Any) -> str:
        return _address_or_value_error(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> int:
        try:
            return parse_amount(value)
        except InputException as e:
            raise ValueError(e.message) from e

    @field_validator("merkle_proof")
    @classmethod
    def _check_proof(cls, value: list[str]) -> list[str]:
        return [_digest_hex(item) for item in value]

    @field_validator("r", "s", mode="before")
    @classmethod
    def _check_component(cls, value: Any) -> int:
        if isinstance(value, str):
            text = value.strip()
            try:
                return int(text, 16) if text.startswith(("0x", "0X")) else int(text, 10)
            except ValueError as e:
                raise ValueError(f"Invalid signature component {value!r}") from e
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("Signature component must be an integer or string")
        return value

    @property
    def proof_bytes(self) -> list[bytes]:
        return [digest_from_hex(item) for item in self.merkle_proof]

    @property
    def signature(self) -> Signature:
        return Signature(v=self.v, r=self.r, s=self.s)


class ClaimEvent(BaseModel):
    """Notification emitted once per successful claim."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sequence: int = Field(..., ge=0, description="Position in this airdrop's claim log")
    claimer: str
    amount: int
    merkle_root: str


class ClaimReceipt(BaseModel):
    """Returned to the caller of a successful claim."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ok: bool = True
    claimer: str
    amount: int
    event: ClaimEvent


__all__ = [
    "DomainSpec",
    "AirdropConfig",
    "ClaimRequest",
    "ClaimEvent",
    "ClaimReceipt",
]
