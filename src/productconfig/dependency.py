"""
Dependency checking between properties.

A property may declare ``depends_on`` prerequisites: another property that
must be supplied with an exact value.  The referenced property is looked
up in the instance through all of its names, so a prerequisite written as
``conf.security`` is satisfied by ``ENV_SECURITY`` too.

Every prerequisite is evaluated; all violations are returned.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

from productconfig.corpus import PropertyCorpus, ResolvedProperty
from productconfig.types import FindingKind


@dataclass(frozen=True)
class DependencyViolation:
    """One unmet prerequisite of a property."""

    kind: FindingKind
    dependency: str
    expected: str
    actual: Optional[str] = None

    @property
    def message(self) -> str:
        if self.kind == FindingKind.MISSING_DEPENDENCY:
            return f"Requires '{self.dependency}' = '{self.expected}', which is not set"
        return (
            f"Requires '{self.dependency}' = '{self.expected}', "
            f"but it is set to '{self.actual}'"
        )


def check_dependencies(
    prop: ResolvedProperty,
    instance: Mapping[str, str],
    corpus: PropertyCorpus,
) -> list[DependencyViolation]:
    """Evaluate every ``depends_on`` entry of ``prop`` against ``instance``.

    Args:
        prop: Property whose prerequisites are checked.
        instance: Supplied configuration (name -> raw value).
        corpus: Corpus used to resolve the referenced properties' names.

    Returns:
        One ``DependencyViolation`` per unmet prerequisite, in declaration
        order.  Empty when all are satisfied.
    """
    violations: list[DependencyViolation] = []
    for dependency in prop.spec.depends_on:
        target = corpus.get(dependency.property)
        actual = corpus.supplied_value(target, instance)
        if actual is None:
            violations.append(
                DependencyViolation(
                    kind=FindingKind.MISSING_DEPENDENCY,
                    dependency=dependency.property,
                    expected=dependency.value,
                )
            )
        elif actual != dependency.value:
            violations.append(
                DependencyViolation(
                    kind=FindingKind.UNSATISFIED_DEPENDENCY,
                    dependency=dependency.property,
                    expected=dependency.value,
                    actual=actual,
                )
            )
    return violations
