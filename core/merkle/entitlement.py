"""
Module 02 - Entitlement Schemas
Records committed by the tree, the input document they are read from,
and the per-record proof bundle entries written out after a build.

Owner: Protocol/Crypto Engineer
Module ID: M02

Input document:
    {"types": ["address", "uint"], "count": N,
     "values": {"0": {"0": "<address>", "1": "<amount>"}, ...}}

Proof bundle entry:
    {"inputs": ["<address>", "<amount>"], "proof": ["0x..", ...],
     "root": "0x..", "leaf": "0x.."}
"""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.crypto.codec import normalize_address, validate_amount
from core.crypto.hashing import digest_from_hex
from core.schemas.errors import InputException

logger = logging.getLogger(__name__)


ENTITLEMENT_TYPES: list[str] = ["address", "uint"]

_DECIMAL_RE = re.compile(r"^[0-9]+$")


def parse_amount(value: Any, field_path: str | None = None) -> int:
    """
    Parse an amount given as a decimal string or a JSON integer.

    Signs, whitespace, exponents and fractional parts are rejected.
    """
    if isinstance(value, str):
        if not _DECIMAL_RE.match(value):
            raise InputException(
                f"Amount must be a non-negative decimal integer string, got {value!r}",
                field_path=field_path,
            )
        return validate_amount(int(value), field_path=field_path)
    return validate_amount(value, field_path=field_path)


class EntitlementRecord(BaseModel):
    """
    One (recipient, amount) pair committed by the tree.

    Immutable. Constructing a record with a malformed address or an
    amount outside uint256 raises InputException.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    recipient: str = Field(..., description="EIP-55 checksummed recipient address")
    amount: int = Field(..., description="Entitlement in token base units")

    @field_validator("recipient", mode="before")
    @classmethod
    def _check_recipient(cls, value: Any) -> str:
        return normalize_address(value, field_path="recipient")

    @field_validator("amount", mode="before")
    @classmethod
    def _check_amount(cls, value: Any) -> int:
        return validate_amount(value, field_path="amount")

    def as_inputs(self) -> list[str]:
        """The record as it appears in a bundle entry's inputs."""
        return [self.recipient, str(self.amount)]


class EntitlementList(BaseModel):
    """The structured entitlement document consumed by the builder."""

    model_config = ConfigDict(extra="forbid")

    types: list[str] = Field(default_factory=lambda: list(ENTITLEMENT_TYPES))
    count: int = Field(..., ge=0)
    values: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_records(cls, records: Sequence[EntitlementRecord]) -> "EntitlementList":
        return cls(
            types=list(ENTITLEMENT_TYPES),
            count=len(records),
            values={
                str(i): {"0": record.recipient, "1": str(record.amount)}
                for i, record in enumerate(records)
            },
        )

    def to_records(self, *, allow_duplicates: bool = False) -> list[EntitlementRecord]:
        """
        Validate the document and return its records in index order.

        Raises:
            InputException: On any malformed or length-inconsistent content
        """
        if self.types != ENTITLEMENT_TYPES:
            raise InputException(
                f"Unsupported field types {self.types}, expected {ENTITLEMENT_TYPES}",
                field_path="types",
            )
        if self.count < 1:
            raise InputException("Entitlement list is empty", field_path="count")
        if len(self.values) != self.count:
            raise InputException(
                f"count is {self.count} but {len(self.values)} values were given",
                field_path="count",
            )

        expected_keys = {str(i) for i in range(self.count)}
        if set(self.values) != expected_keys:
            unexpected = sorted(set(self.values) - expected_keys)
            raise InputException(
                f"Value indices must be 0..{self.count - 1}, found unexpected {unexpected}",
                field_path="values",
            )

        records: list[EntitlementRecord] = []
        seen: dict[str, int] = {}
        for i in range(self.count):
            entry = self.values[str(i)]
            path = f"values.{i}"
            if set(entry) != {"0", "1"}:
                raise InputException(
                    f"Entry {i} must have exactly the fields '0' and '1'",
                    field_path=path,
                )
            recipient = normalize_address(entry["0"], field_path=f"{path}.0")
            amount = parse_amount(entry["1"], field_path=f"{path}.1")

            if recipient in seen:
                if not allow_duplicates:
                    raise InputException(
                        f"Recipient {recipient} appears at indices {seen[recipient]} and {i}",
                        field_path=path,
                        details={"recipient": recipient},
                    )
                logger.warning(f"Duplicate recipient {recipient} at index {i}")
            seen.setdefault(recipient, i)

            records.append(EntitlementRecord(recipient=recipient, amount=amount))
        return records


def load_entitlement_list(
    data: dict[str, Any],
    *,
    allow_duplicates: bool = False,
) -> list[EntitlementRecord]:
    """
    Parse and validate a raw entitlement document.

    Raises:
        InputException: If the document is malformed; structural pydantic
            errors are reported with their first failing location
    """
    try:
        document = EntitlementList.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise InputException(
            f"Malformed entitlement list: {first.get('msg', str(e))}",
            field_path=location or None,
            details={"error_count": e.error_count()},
        ) from e
    return document.to_records(allow_duplicates=allow_duplicates)


def make_entitlement_list(recipients: Iterable[str], amount: int) -> EntitlementList:
    """Build an input document giving every recipient the same amount."""
    records = [EntitlementRecord(recipient=r, amount=amount) for r in recipients]
    return EntitlementList.from_records(records)


class ProofBundleEntry(BaseModel):
    """
    Published proof for one record.

    Digests are 0x-prefixed hex strings; the amount is a decimal string
    so no JSON consumer loses precision.
    """

    model_config = ConfigDict(extra="forbid")

    inputs: list[str] = Field(..., min_length=2, max_length=2)
    proof: list[str] = Field(default_factory=list)
    root: str
    leaf: str

    @field_validator("proof")
    @classmethod
    def _check_proof(cls, value: list[str]) -> list[str]:
        for item in value:
            digest_from_hex(item)
        return value

    @field_validator("root", "leaf")
    @classmethod
    def _check_digest(cls, value: str) -> str:
        digest_from_hex(value)
        return value

    @property
    def record(self) -> EntitlementRecord:
        """Decode inputs. Raises InputException if they are malformed."""
        return EntitlementRecord(
            recipient=self.inputs[0],
            amount=parse_amount(self.inputs[1], field_path="inputs.1"),
        )

    @property
    def proof_bytes(self) -> list[bytes]:
        return [digest_from_hex(item) for item in self.proof]

    @property
    def root_bytes(self) -> bytes:
        return digest_from_hex(self.root)

    @property
    def leaf_bytes(self) -> bytes:
        return digest_from_hex(self.leaf)


__all__ = [
    "ENTITLEMENT_TYPES",
    "parse_amount",
    "EntitlementRecord",
    "EntitlementList",
    "load_entitlement_list",
    "make_entitlement_list",
    "ProofBundleEntry",
]
