"""
Module 01 - Schemas & Canonicalization
File: verification.py

Per-entry outcomes of a proof bundle check.

The builder self-check and the offline bundle verifier report through
these models instead of raising, so one bad entry never hides the rest.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """Outcome of one check, usually about one bundle entry."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1)
    ok: bool
    severity: CheckSeverity
    message: str
    index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Leaf index the check is about, if any",
    )
    code: Optional[str] = Field(
        default=None,
        description="ErrorCodes value for failures",
    )
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @property
    def is_warning(self) -> bool:
        return self.severity == "warn"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        *,
        index: Optional[int] = None,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            index=index,
            details=details or {},
        )

    @classmethod
    def warning(
        cls,
        check_id: str,
        message: str,
        *,
        index: Optional[int] = None,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """A finding that does not fail verification."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="warn",
            message=message,
            index=index,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        *,
        index: Optional[int] = None,
        code: Optional[str] = None,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            index=index,
            code=code,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Aggregate of a bundle check.

    ok is False exactly when at least one check is an error. Warnings
    (for example an unexpected proof length that still folds to the
    root) are reported but never flip ok.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool
    checks: list[CheckResult] = Field(default_factory=list)
    failed_indices: list[int] = Field(
        default_factory=list,
        description="Leaf indices whose entries did not verify",
    )

    @property
    def errors(self) -> list[CheckResult]:
        return [check for check in self.checks if check.is_error]

    @property
    def warnings(self) -> list[CheckResult]:
        return [check for check in self.checks if check.is_warning]

    @property
    def passed_count(self) -> int:
        return sum(1 for check in self.checks if check.ok)

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.errors]

    def codes_by_index(self) -> dict[int, str]:
        """Failure code of each failed entry."""
        return {
            check.index: check.code or "UNKNOWN"
            for check in self.errors
            if check.index is not None
        }

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        errors = [check for check in checks if check.is_error]
        return cls(
            ok=not errors,
            checks=checks,
            failed_indices=sorted({c.index for c in errors if c.index is not None}),
        )
