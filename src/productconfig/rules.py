"""
Per-property validation rules.

Each rule is a plain function ``(PropertyContext) -> list[Finding]`` that
checks one aspect of a supplied property.  The engine runs an ordered rule
list over every supplied property; adding a check means adding a function
to the list, not editing the existing ones.

Default order:
    1. version gate      PropertyNotYetAvailable (error)
    2. deprecation       DeprecatedProperty (warning)
    3. datatype          TypeMismatch / OutOfRange / TooLong / TooShort / PatternMismatch (error)
    4. allowed values    PropertyRetired / NotAnAllowedValue (error)
    5. dependencies      MissingDependency / UnsatisfiedDependency (error)
    6. restart notice    RestartRequired (warning)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from productconfig.corpus import PropertyCorpus, ResolvedProperty
from productconfig.datatype import validate_datatype
from productconfig.dependency import check_dependencies
from productconfig.findings import Finding
from productconfig.types import FindingKind, Severity
from productconfig.version import Version


@dataclass(frozen=True)
class PropertyContext:
    """Everything a rule may look at for one supplied property."""

    supplied_name: str
    value: str
    prop: ResolvedProperty
    version: Version
    roles: frozenset[str]
    instance: Mapping[str, str]
    corpus: PropertyCorpus
    report_restart_required: bool = True

    def finding(
        self,
        kind: FindingKind,
        severity: Severity,
        message: str,
        **details: Any,
    ) -> Finding:
        return Finding(
            property_name=self.supplied_name,
            canonical_name=self.prop.name,
            kind=kind,
            severity=severity,
            message=message,
            details=details,
        )


RuleFn = Callable[[PropertyContext], list[Finding]]


def rule_version_gate(ctx: PropertyContext) -> list[Finding]:
    if ctx.prop.exists_at(ctx.version):
        return []
    return [
        ctx.finding(
            FindingKind.PROPERTY_NOT_YET_AVAILABLE,
            Severity.ERROR,
            f"Property is available as of version {ctx.prop.as_of_version}, "
            f"product version is {ctx.version}",
            as_of_version=str(ctx.prop.as_of_version),
            version=str(ctx.version),
        )
    ]


def rule_deprecation(ctx: PropertyContext) -> list[Finding]:
    if not ctx.prop.deprecated_at(ctx.version):
        return []
    replacements = list(ctx.prop.spec.deprecated_for)
    message = f"Property is deprecated since version {ctx.prop.deprecated_since}"
    if replacements:
        message += f"; use {', '.join(repr(r) for r in replacements)} instead"
    return [
        ctx.finding(
            FindingKind.DEPRECATED_PROPERTY,
            Severity.WARNING,
            message,
            deprecated_since=str(ctx.prop.deprecated_since),
            version=str(ctx.version),
            deprecated_for=replacements,
        )
    ]


def rule_datatype(ctx: PropertyContext) -> list[Finding]:
    result = validate_datatype(ctx.value, ctx.prop.spec.datatype, ctx.corpus.units)
    if result.ok or result.kind is None:
        return []
    return [ctx.finding(result.kind, Severity.ERROR, result.message, **result.details)]


def rule_allowed_values(ctx: PropertyContext) -> list[Finding]:
    allowed = ctx.prop.spec.allowed_values
    if allowed is None:
        return []
    if not allowed:
        return [
            ctx.finding(
                FindingKind.PROPERTY_RETIRED,
                Severity.ERROR,
                "Property is retired; no value is accepted",
                actual=ctx.value,
            )
        ]
    if ctx.value in allowed:
        return []
    return [
        ctx.finding(
            FindingKind.NOT_AN_ALLOWED_VALUE,
            Severity.ERROR,
            f"Value '{ctx.value}' is not one of {allowed}",
            actual=ctx.value,
            allowed_values=list(allowed),
        )
    ]


def rule_dependencies(ctx: PropertyContext) -> list[Finding]:
    return [
        ctx.finding(
            violation.kind,
            Severity.ERROR,
            violation.message,
            dependency=violation.dependency,
            expected=violation.expected,
            actual=violation.actual,
        )
        for violation in check_dependencies(ctx.prop, ctx.instance, ctx.corpus)
    ]


def rule_restart_required(ctx: PropertyContext) -> list[Finding]:
    if not (ctx.report_restart_required and ctx.prop.spec.restart_required):
        return []
    return [
        ctx.finding(
            FindingKind.RESTART_REQUIRED,
            Severity.WARNING,
            "Changing this property requires a restart",
        )
    ]


RULES: dict[str, RuleFn] = {
    "version_gate": rule_version_gate,
    "deprecation": rule_deprecation,
    "datatype": rule_datatype,
    "allowed_values": rule_allowed_values,
    "dependencies": rule_dependencies,
    "restart_required": rule_restart_required,
}

DEFAULT_RULES: tuple[RuleFn, ...] = tuple(RULES.values())
