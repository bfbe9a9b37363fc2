"""
Exceptions raised while loading and checking a property corpus.

Instance validation never raises: discrepancies in a configuration
instance are reported as ``Finding`` objects.  The exceptions here cover
the corpus tier only, and are fatal at startup.

Hierarchy::

    CorpusError
    ├── CorpusLoadError        file access, parsing, schema violations
    ├── CorpusIntegrityError   overlapping ranges, dangling references, ...
    └── UnknownUnit            registry lookup of an unregistered unit

    InvalidVersionError        malformed dotted version string (ValueError)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class CorpusError(Exception):
    """Base class for all corpus-tier failures."""


class CorpusLoadError(CorpusError):
    """
    Raised when a corpus file cannot be read, parsed or matched to the schema.

    Attributes:
        path: File that was being loaded (``None`` for in-memory strings).
        field: Dot-joined location of the offending field, if known.
        line: 1-based line number reported by the parser, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[Union[str, Path]] = None,
        field: Optional[str] = None,
        line: Optional[int] = None,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.field = field
        self.line = line

        location = self.path or "<string>"
        if line is not None:
            location += f":{line}"
        if field:
            location += f" [{field}]"
        super().__init__(f"{location}: {message}")


class CorpusIntegrityError(CorpusError):
    """
    Raised when a parsed corpus is internally inconsistent.

    Attributes:
        property_name: First name of the property implicated, if any.
    """

    def __init__(self, message: str, *, property_name: Optional[str] = None) -> None:
        self.property_name = property_name
        prefix = f"{property_name}: " if property_name else ""
        super().__init__(f"{prefix}{message}")


class UnknownUnit(CorpusError, KeyError):
    """Raised when a unit name is not present in the unit registry."""

    def __init__(self, unit_name: str) -> None:
        self.unit_name = unit_name
        super().__init__(unit_name)

    def __str__(self) -> str:
        return f"Unknown unit '{self.unit_name}'"


class InvalidVersionError(ValueError):
    """Raised when a version string is not a dotted numeric version."""
