"""
Validation engine for configuration instances.

Validates a configuration instance (property name -> raw string value)
against a ``PropertyCorpus`` for a product version and a set of active
roles.  Evaluation is exhaustive: no finding stops the run, so one call
reports every problem.

Order of findings:
    1. supplied properties, in input order; per property the rule list
       order (see ``productconfig.rules``)
    2. missing required properties, in corpus order

Usage::

    from productconfig.validator import ValidationEngine

    engine = ValidationEngine(corpus)
    report = engine.validate_instance(
        {"conf.integer.port.min.max": "70000"}, "1.0.0", {"role_1"}
    )
    if not report.passed:
        for finding in report.error_findings():
            logger.error("%s", finding)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional, Union

from productconfig.corpus import PropertyCorpus
from productconfig.findings import Finding, ValidationReport
from productconfig.otel import emit_validation_result
from productconfig.rules import DEFAULT_RULES, PropertyContext, RuleFn
from productconfig.settings import ProductConfigSettings, get_settings
from productconfig.types import FindingKind, Severity
from productconfig.version import Version

logger = logging.getLogger(__name__)

VersionLike = Union[str, Version]


def _as_version(version: VersionLike) -> Version:
    return version if isinstance(version, Version) else Version.parse(version)


def _as_roles(roles: Union[str, Iterable[str]]) -> frozenset[str]:
    # a bare role name is one role, not a set of characters
    if isinstance(roles, str):
        return frozenset((roles,))
    return frozenset(roles)


class ValidationEngine:
    """Validates configuration instances against a loaded corpus.

    The engine holds no per-call state; one instance may serve any number
    of concurrent ``validate_instance`` calls.

    Args:
        corpus: Integrity-checked corpus to validate against.
        rules: Ordered per-property rules (defaults to ``DEFAULT_RULES``).
        settings: Engine settings (defaults to the global settings).
    """

    def __init__(
        self,
        corpus: PropertyCorpus,
        rules: Sequence[RuleFn] = DEFAULT_RULES,
        settings: Optional[ProductConfigSettings] = None,
    ) -> None:
        self._corpus = corpus
        self._rules = tuple(rules)
        self._settings = settings or get_settings()

    @property
    def corpus(self) -> PropertyCorpus:
        return self._corpus

    def validate_instance(
        self,
        instance: Mapping[str, str],
        version: VersionLike,
        roles: Union[str, Iterable[str]] = (),
    ) -> ValidationReport:
        """Validate a whole configuration instance.

        Args:
            instance: Supplied configuration; keys may use any name form.
            version: Product version the configuration targets.
            roles: Active roles.

        Returns:
            ``ValidationReport`` with ordered findings.

        Raises:
            InvalidVersionError: If ``version`` is not a dotted version.
        """
        query = _as_version(version)
        active_roles = _as_roles(roles)
        findings: list[Finding] = []
        # property index -> first name it was supplied under
        seen: dict[int, str] = {}

        for name, value in instance.items():
            findings.extend(
                self._validate_supplied(name, value, query, active_roles, instance, seen)
            )

        missing = self._missing_required(query, active_roles, seen)
        if missing:
            logger.debug(
                "Missing required properties at %s: %s",
                query,
                ", ".join(f.property_name for f in missing),
            )
        findings.extend(missing)

        report = ValidationReport.from_findings(
            findings,
            version=str(query),
            roles=sorted(active_roles),
            total_checked=len(instance),
        )
        emit_validation_result(report)
        return report

    def validate_option(
        self,
        name: str,
        value: str,
        version: VersionLike,
        roles: Union[str, Iterable[str]] = (),
        instance: Optional[Mapping[str, str]] = None,
    ) -> list[Finding]:
        """Validate a single option, without the missing-required pass.

        Args:
            name: Property name in any name form.
            value: Raw value.
            version: Product version.
            roles: Active roles.
            instance: Surrounding configuration used to resolve
                dependencies; defaults to just ``{name: value}``.
        """
        context = dict(instance) if instance is not None else {}
        context[name] = value
        return self._validate_supplied(
            name, value, _as_version(version), _as_roles(roles), context, {}
        )

    def _validate_supplied(
        self,
        name: str,
        value: str,
        version: Version,
        roles: frozenset[str],
        instance: Mapping[str, str],
        seen: dict[int, str],
    ) -> list[Finding]:
        prop = self._corpus.lookup(name)
        if prop is None:
            return [
                Finding(
                    property_name=name,
                    canonical_name=None,
                    kind=FindingKind.UNKNOWN_PROPERTY,
                    severity=Severity(self._settings.unknown_property_severity),
                    message=f"Unknown property '{name}'",
                )
            ]

        findings: list[Finding] = []
        if prop.index in seen:
            findings.append(
                Finding(
                    property_name=name,
                    canonical_name=prop.name,
                    kind=FindingKind.DUPLICATE_PROPERTY,
                    severity=Severity.WARNING,
                    message=f"Property already supplied as '{seen[prop.index]}'",
                    details={"first_name": seen[prop.index]},
                )
            )
        else:
            seen[prop.index] = name

        ctx = PropertyContext(
            supplied_name=name,
            value=value,
            prop=prop,
            version=version,
            roles=roles,
            instance=instance,
            corpus=self._corpus,
            report_restart_required=self._settings.report_restart_required,
        )
        for rule in self._rules:
            findings.extend(rule(ctx))
        return findings

    def _missing_required(
        self,
        version: Version,
        roles: frozenset[str],
        seen: dict[int, str],
    ) -> list[Finding]:
        findings: list[Finding] = []
        for prop in self._corpus:
            if prop.index in seen:
                continue
            if not prop.spec.is_required_for(roles):
                continue
            if not prop.exists_at(version) or prop.deprecated_at(version):
                continue
            required_by = sorted(
                r.name for r in prop.spec.roles if r.required and r.name in roles
            )
            if required_by:
                message = f"Required property is not set (required by {', '.join(required_by)})"
            else:
                message = "Required property is not set (importance: required)"
            findings.append(
                Finding(
                    property_name=prop.name,
                    canonical_name=prop.name,
                    kind=FindingKind.MISSING_REQUIRED_PROPERTY,
                    severity=Severity.ERROR,
                    message=message,
                    details={
                        "roles": required_by,
                        "names": prop.spec.names,
                        "importance": prop.spec.importance.value if prop.spec.importance else None,
                    },
                )
            )
        return findings


def validate(
    instance: Mapping[str, str],
    version: VersionLike,
    roles: Union[str, Iterable[str]],
    corpus: PropertyCorpus,
) -> list[Finding]:
    """Validate ``instance`` and return the ordered findings.

    Functional form of ``ValidationEngine(corpus).validate_instance(...)``.
    """
    return ValidationEngine(corpus).validate_instance(instance, version, roles).findings
