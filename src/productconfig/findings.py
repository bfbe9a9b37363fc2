"""
Result models for configuration instance validation.

A ``Finding`` is one discrepancy attached to one property.  A
``ValidationReport`` collects the ordered findings of one validation call.

Severity behavior:
    - ``ERROR``   -> ``passed=False``; the caller should refuse the configuration.
    - ``WARNING`` -> advisory only (deprecation, restart notice, unknown key).
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from productconfig.types import FindingKind, Severity


class Finding(BaseModel):
    """One validation outcome attached to a property."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    property_name: str = Field(
        ..., description="Property name as supplied (first corpus name when not supplied)"
    )
    canonical_name: Optional[str] = Field(
        None, description="First corpus name of the property (None if unknown)"
    )
    kind: FindingKind
    severity: Severity
    message: str = ""
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Bound violated, expected vs actual, unit name, ...",
    )

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value.upper()}: [{self.kind.value}] {self.property_name} - {self.message}"


class ValidationReport(BaseModel):
    """Aggregated, ordered findings of one instance validation."""

    model_config = ConfigDict(extra="forbid")

    passed: bool = Field(..., description="True if no ERROR findings were produced")
    version: str = Field(..., description="Product version validated against")
    roles: list[str] = Field(default_factory=list, description="Active roles, sorted")
    total_checked: int = Field(0, description="Number of supplied properties")
    errors: int = 0
    warnings: int = 0
    findings: list[Finding] = Field(default_factory=list)

    @classmethod
    def from_findings(
        cls,
        findings: list[Finding],
        *,
        version: str,
        roles: list[str],
        total_checked: int,
    ) -> "ValidationReport":
        errors = sum(1 for f in findings if f.severity == Severity.ERROR)
        return cls(
            passed=errors == 0,
            version=version,
            roles=roles,
            total_checked=total_checked,
            errors=errors,
            warnings=len(findings) - errors,
            findings=findings,
        )

    def error_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    def warning_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    def of_kind(self, kind: FindingKind) -> list[Finding]:
        return [f for f in self.findings if f.kind == kind]
