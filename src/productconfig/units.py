"""
Registry of named validation patterns ("units").

A unit names a regular expression (``port``, ``memory``, ``url`` ...) that
string-typed properties reference from their datatype.  Patterns are
compiled once when the corpus loads; the registry is never mutated after
construction.

Matching always uses full-string semantics (``Pattern.fullmatch``).  Some
corpus patterns are anchored only at the start (``^[0-9]+m``), and a
partial match must not accept trailing garbage.

Usage::

    from productconfig.units import UnitRegistry

    registry = UnitRegistry.from_specs(corpus_spec.config_settings.unit)
    registry.matches("memory", "512m")  # True
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from productconfig.errors import CorpusIntegrityError, UnknownUnit

if TYPE_CHECKING:
    from productconfig.schema import UnitSpec

logger = logging.getLogger(__name__)


class UnitRegistry:
    """Immutable name -> compiled pattern lookup."""

    def __init__(
        self,
        patterns: Mapping[str, re.Pattern[str]],
        examples: Mapping[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._patterns = MappingProxyType(dict(patterns))
        self._examples = MappingProxyType(dict(examples or {}))

    @classmethod
    def from_specs(cls, units: Iterable["UnitSpec"]) -> "UnitRegistry":
        """Compile unit specs into a registry.

        Raises:
            CorpusIntegrityError: On an empty, invalid or duplicate unit.
        """
        patterns: dict[str, re.Pattern[str]] = {}
        examples: dict[str, tuple[str, ...]] = {}
        for unit in units:
            if unit.name in patterns:
                raise CorpusIntegrityError(f"Duplicate unit '{unit.name}'")
            if not unit.regex:
                raise CorpusIntegrityError(f"Unit '{unit.name}' has an empty regex pattern")
            try:
                patterns[unit.name] = re.compile(unit.regex)
            except re.error as exc:
                raise CorpusIntegrityError(
                    f"Unit '{unit.name}' has an invalid regex pattern '{unit.regex}': {exc}"
                ) from exc
            examples[unit.name] = tuple(unit.examples)

        logger.debug("Compiled %d unit pattern(s)", len(patterns))
        return cls(patterns, examples)

    def __contains__(self, unit_name: object) -> bool:
        return unit_name in self._patterns

    def __len__(self) -> int:
        return len(self._patterns)

    def names(self) -> list[str]:
        return list(self._patterns)

    def resolve(self, unit_name: str) -> re.Pattern[str]:
        """Return the compiled pattern for ``unit_name``.

        Raises:
            UnknownUnit: If the unit is not registered.
        """
        try:
            return self._patterns[unit_name]
        except KeyError:
            raise UnknownUnit(unit_name) from None

    def matches(self, unit_name: str, value: str) -> bool:
        """Full-string match of ``value`` against the unit's pattern.

        Raises:
            UnknownUnit: If the unit is not registered.
        """
        return self.resolve(unit_name).fullmatch(value) is not None

    def check_examples(self) -> list[tuple[str, str]]:
        """Return every ``(unit, example)`` pair that fails its own pattern."""
        failures: list[tuple[str, str]] = []
        for name, unit_examples in self._examples.items():
            for example in unit_examples:
                if not self.matches(name, example):
                    failures.append((name, example))
        return failures
