"""
Dotted versions and version-scoped value resolution.

Default and recommended values in the corpus are scoped by product
version: each entry carries an inclusive ``from_version`` and an optional
``to_version``.  This module parses versions, models ranges, rejects
overlapping entries at load time and picks the single entry effective at a
query version.

Range convention:
    ``from_version`` is always inclusive.  ``to_version`` is exclusive
    unless the corpus declares ``range_end: inclusive``.

Usage::

    from productconfig.version import Version, VersionRange, resolve_effective

    entries = [
        VersionedEntry(VersionRange(Version.parse("0.5.0"), Version.parse("1.0.0")), "100"),
        VersionedEntry(VersionRange(Version.parse("1.0.0")), "200"),
    ]
    resolve_effective(entries, Version.parse("0.9.9"))  # "100"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Generic, Optional, Sequence, TypeVar

from productconfig.errors import CorpusIntegrityError, InvalidVersionError

T = TypeVar("T")

_VERSION_RE = re.compile(r"^[0-9]+(\.[0-9]+)*$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A dotted numeric version; missing components compare as zero."""

    components: tuple[int, ...]
    text: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``"1.0.0"``-style text.

        Raises:
            InvalidVersionError: If ``text`` is not dotted numeric.
        """
        if not isinstance(text, str):
            raise InvalidVersionError(f"Version must be a string, got {type(text).__name__}")
        stripped = text.strip()
        if not _VERSION_RE.match(stripped):
            raise InvalidVersionError(f"Invalid version '{text}'")
        try:
            components = tuple(int(p) for p in stripped.split("."))
        except ValueError as exc:
            raise InvalidVersionError(f"Invalid version '{text}': {exc}") from exc
        return cls(components, stripped)

    def _key(self) -> tuple[int, ...]:
        # Trailing zeros are insignificant: 1.0 == 1.0.0
        parts = list(self.components)
        while parts and parts[-1] == 0:
            parts.pop()
        return tuple(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        width = max(len(self.components), len(other.components))
        mine = self.components + (0,) * (width - len(self.components))
        theirs = other.components + (0,) * (width - len(other.components))
        return mine < theirs

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.text or ".".join(str(c) for c in self.components)


@dataclass(frozen=True)
class VersionRange:
    """A version interval with an inclusive start and an optional end."""

    start: Version
    end: Optional[Version] = None
    end_inclusive: bool = False

    def contains(self, version: Version) -> bool:
        if version < self.start:
            return False
        if self.end is None:
            return True
        if self.end_inclusive:
            return version <= self.end
        return version < self.end

    def is_empty(self) -> bool:
        if self.end is None:
            return False
        if self.end_inclusive:
            return self.end < self.start
        return self.end <= self.start

    def overlaps(self, other: "VersionRange") -> bool:
        """True if some version lies in both ranges."""
        first, second = (self, other) if self.start <= other.start else (other, self)
        return first.contains(second.start)

    def __str__(self) -> str:
        if self.end is None:
            return f"[{self.start}, ∞)"
        closing = "]" if self.end_inclusive else ")"
        return f"[{self.start}, {self.end}{closing}"


@dataclass(frozen=True)
class VersionedEntry(Generic[T]):
    """A value effective over a version range."""

    range: VersionRange
    value: T


def check_non_overlapping(
    entries: Sequence[VersionedEntry[T]],
    label: str,
    property_name: Optional[str] = None,
) -> list[VersionedEntry[T]]:
    """Validate ranges and return the entries sorted by start version.

    Args:
        entries: Entries of a single attribute (e.g. default values).
        label: Attribute name used in error messages.
        property_name: Owning property, for error messages.

    Raises:
        CorpusIntegrityError: If a range is empty or two ranges overlap.
    """
    ordered = sorted(entries, key=lambda e: e.range.start)
    for entry in ordered:
        if entry.range.is_empty():
            raise CorpusIntegrityError(
                f"{label} range {entry.range} is empty",
                property_name=property_name,
            )
    for previous, current in zip(ordered, ordered[1:]):
        if previous.range.overlaps(current.range):
            raise CorpusIntegrityError(
                f"{label} ranges {previous.range} and {current.range} overlap",
                property_name=property_name,
            )
    return ordered


def resolve_effective(
    entries: Sequence[VersionedEntry[T]], query: Version
) -> Optional[T]:
    """Return the value whose range contains ``query``, or ``None``.

    ``entries`` must already have passed ``check_non_overlapping``; at most
    one entry can match.
    """
    for entry in entries:
        if entry.range.contains(query):
            return entry.value
    return None
