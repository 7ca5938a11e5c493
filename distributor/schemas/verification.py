"""
Module 01 - Schemas
File: verification.py

Audit report for a published distribution artifact. Each property of
the artifact is one CheckResult; the report is returned, never raised.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """One audited property of an artifact."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="Property name, e.g. merkle_root")
    ok: bool
    severity: CheckSeverity
    message: str
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Offending identifiers, expected/actual values",
    )

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """All checks run against one artifact; ok only if every check passed."""

    model_config = ConfigDict(extra="forbid")

    ok: bool
    checks: list[CheckResult] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for check in self.checks if check.is_error)

    @property
    def passed_count(self) -> int:
        return sum(1 for check in self.checks if check.ok)

    def get_error_messages(self) -> list[str]:
        """Messages of the failed checks, in check order."""
        return [check.message for check in self.checks if check.is_error]
