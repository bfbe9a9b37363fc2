"""
Immutable in-memory property corpus.

``PropertyCorpus`` wraps a parsed ``PropertyCorpusSpec`` and performs every
cross-entry consistency check once, at construction:

    - property names are unique across the corpus (all name kinds)
    - versions parse, and ``as_of_version`` precedes every range start
    - default / recommended ranges are non-empty and do not overlap
    - every unit referenced by a datatype is registered, and ``default_unit``
      is one of ``accepted_units`` when both are given
    - numeric bounds parse (and fit the datatype) and ``min <= max``
    - ``depends_on`` and ``deprecated_for`` reference known properties
    - unit examples match their own pattern (when verification is enabled)

Any failure raises ``CorpusIntegrityError``; a corpus that constructs
successfully is safe to share between threads without locking.

Usage::

    from productconfig.corpus import PropertyCorpus

    corpus = PropertyCorpus(spec)
    prop = corpus.lookup("ENV_INTEGER_PORT_MIN_MAX")
    corpus.effective_default("conf.integer.port.min.max", "1.0.0")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Union

from productconfig.datatype import parse_bound
from productconfig.errors import CorpusIntegrityError, InvalidVersionError
from productconfig.schema import PropertyCorpusSpec, PropertySpec, VersionedValue
from productconfig.types import DatatypeKind, RangeEnd
from productconfig.units import UnitRegistry
from productconfig.version import (
    Version,
    VersionedEntry,
    VersionRange,
    check_non_overlapping,
    resolve_effective,
)

logger = logging.getLogger(__name__)

VersionLike = Union[str, Version]


@dataclass(frozen=True)
class ResolvedProperty:
    """A ``PropertySpec`` with its versions parsed and ranges validated."""

    spec: PropertySpec
    index: int
    as_of_version: Version
    deprecated_since: Optional[Version]
    defaults: tuple[VersionedEntry[str], ...]
    recommendations: tuple[VersionedEntry[str], ...]

    @property
    def name(self) -> str:
        return self.spec.name

    def exists_at(self, version: Version) -> bool:
        return self.as_of_version <= version

    def deprecated_at(self, version: Version) -> bool:
        return self.deprecated_since is not None and self.deprecated_since <= version


def _as_version(version: VersionLike) -> Version:
    return version if isinstance(version, Version) else Version.parse(version)


def _parse_version(text: str, what: str, property_name: str) -> Version:
    try:
        return Version.parse(text)
    except InvalidVersionError as exc:
        raise CorpusIntegrityError(f"{what}: {exc}", property_name=property_name) from exc


class PropertyCorpus:
    """Integrity-checked, read-only view of a property corpus.

    Args:
        spec: Parsed corpus file.
        verify_unit_examples: Fail construction if a unit example does not
            match its own pattern.
    """

    def __init__(self, spec: PropertyCorpusSpec, *, verify_unit_examples: bool = True) -> None:
        self._spec = spec
        self._end_inclusive = spec.config_settings.range_end == RangeEnd.INCLUSIVE
        self._units = UnitRegistry.from_specs(spec.config_settings.unit)

        if verify_unit_examples:
            failures = self._units.check_examples()
            if failures:
                listed = ", ".join(f"{unit}={example!r}" for unit, example in failures)
                raise CorpusIntegrityError(f"Unit examples do not match their pattern: {listed}")

        properties: list[ResolvedProperty] = []
        # name (any kind) -> ResolvedProperty
        aliases: dict[str, ResolvedProperty] = {}

        for index, prop in enumerate(spec.config_options):
            resolved = self._resolve_property(prop, index)
            for name in prop.names:
                if name in aliases:
                    raise CorpusIntegrityError(
                        f"Name '{name}' is already used by '{aliases[name].name}'",
                        property_name=prop.name,
                    )
                aliases[name] = resolved
            properties.append(resolved)

        self._properties = tuple(properties)
        self._aliases = MappingProxyType(aliases)
        self._check_references()

        logger.debug(
            "Property corpus built: properties=%d, names=%d, units=%d",
            len(self._properties),
            len(self._aliases),
            len(self._units),
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _resolve_property(self, prop: PropertySpec, index: int) -> ResolvedProperty:
        as_of = _parse_version(prop.as_of_version, "as_of_version", prop.name)
        deprecated = (
            _parse_version(prop.deprecated_since, "deprecated_since", prop.name)
            if prop.deprecated_since is not None
            else None
        )

        self._check_datatype(prop)

        defaults = self._resolve_ranges(prop, prop.default_values, "default_values", as_of)
        recommendations = self._resolve_ranges(
            prop, prop.recommended_values, "recommended_values", as_of
        )

        return ResolvedProperty(
            spec=prop,
            index=index,
            as_of_version=as_of,
            deprecated_since=deprecated,
            defaults=tuple(defaults),
            recommendations=tuple(recommendations),
        )

    def _resolve_ranges(
        self,
        prop: PropertySpec,
        values: list[VersionedValue],
        label: str,
        as_of: Version,
    ) -> list[VersionedEntry[str]]:
        entries: list[VersionedEntry[str]] = []
        for item in values:
            start = (
                _parse_version(item.from_version, f"{label}.from_version", prop.name)
                if item.from_version is not None
                else as_of
            )
            if start < as_of:
                raise CorpusIntegrityError(
                    f"{label} starts at {start}, before as_of_version {as_of}",
                    property_name=prop.name,
                )
            end = (
                _parse_version(item.to_version, f"{label}.to_version", prop.name)
                if item.to_version is not None
                else None
            )
            entries.append(
                VersionedEntry(VersionRange(start, end, self._end_inclusive), item.value)
            )
        return check_non_overlapping(entries, label, property_name=prop.name)

    def _check_datatype(self, prop: PropertySpec) -> None:
        datatype = prop.datatype
        if datatype.unit is not None and datatype.unit not in self._units:
            raise CorpusIntegrityError(
                f"Unknown unit '{datatype.unit}'", property_name=prop.name
            )
        # accepted_units are measurement suffixes ("ms", "s"), not unit patterns
        if (
            datatype.default_unit is not None
            and datatype.accepted_units
            and datatype.default_unit not in datatype.accepted_units
        ):
            raise CorpusIntegrityError(
                f"default_unit '{datatype.default_unit}' is not one of the accepted_units",
                property_name=prop.name,
            )
        if datatype.type in (DatatypeKind.BOOL, DatatypeKind.ARRAY):
            if datatype.min is not None or datatype.max is not None:
                raise CorpusIntegrityError(
                    f"{datatype.type.value} datatype cannot declare min/max",
                    property_name=prop.name,
                )
            return

        bounds = {}
        for bound_name in ("min", "max"):
            raw = getattr(datatype, bound_name)
            if raw is None:
                continue
            parsed = parse_bound(datatype, raw)
            if parsed is None:
                raise CorpusIntegrityError(
                    f"{bound_name} bound '{raw}' is not valid for {datatype.type.value}",
                    property_name=prop.name,
                )
            bounds[bound_name] = parsed
        if "min" in bounds and "max" in bounds and bounds["min"] > bounds["max"]:
            raise CorpusIntegrityError(
                f"min {bounds['min']} is greater than max {bounds['max']}",
                property_name=prop.name,
            )

    def _check_references(self) -> None:
        for prop in self._properties:
            for dependency in prop.spec.depends_on:
                target = self._aliases.get(dependency.property)
                if target is None:
                    raise CorpusIntegrityError(
                        f"depends_on references unknown property '{dependency.property}'",
                        property_name=prop.name,
                    )
                if target is prop:
                    raise CorpusIntegrityError(
                        "depends_on references the property itself",
                        property_name=prop.name,
                    )
            for replacement in prop.spec.deprecated_for:
                if replacement not in self._aliases:
                    raise CorpusIntegrityError(
                        f"deprecated_for references unknown property '{replacement}'",
                        property_name=prop.name,
                    )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def spec(self) -> PropertyCorpusSpec:
        return self._spec

    @property
    def units(self) -> UnitRegistry:
        return self._units

    @property
    def range_end(self) -> RangeEnd:
        return RangeEnd.INCLUSIVE if self._end_inclusive else RangeEnd.EXCLUSIVE

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> Iterator[ResolvedProperty]:
        return iter(self._properties)

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def lookup(self, name: str) -> Optional[ResolvedProperty]:
        """Resolve any registered name form to its property, or ``None``."""
        return self._aliases.get(name)

    def get(self, name: str) -> ResolvedProperty:
        """Like ``lookup`` but raises ``KeyError`` for unknown names."""
        prop = self._aliases.get(name)
        if prop is None:
            raise KeyError(name)
        return prop

    def supplied_value(self, prop: ResolvedProperty, instance: Mapping[str, str]) -> Optional[str]:
        """Value ``instance`` supplies for ``prop`` under any of its names.

        Names are tried in declaration order.
        """
        for name in prop.spec.names:
            if name in instance:
                return instance[name]
        return None

    def effective_default(self, name: str, version: VersionLike) -> Optional[str]:
        """Default value of property ``name`` at ``version``, if any.

        Raises:
            KeyError: If ``name`` is not a registered property name.
        """
        return resolve_effective(self.get(name).defaults, _as_version(version))

    def effective_recommended(self, name: str, version: VersionLike) -> Optional[str]:
        """Recommended value of property ``name`` at ``version``, if any.

        Raises:
            KeyError: If ``name`` is not a registered property name.
        """
        return resolve_effective(self.get(name).recommendations, _as_version(version))
