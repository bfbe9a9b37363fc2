"""
Core enums for product configuration validation.

Every value that crosses a module boundary as a "kind" or "level" is a
``str`` enum so it serialises cleanly in findings, logs and span events.

Example:
    from productconfig.types import FindingKind, Severity

    if finding.kind == FindingKind.OUT_OF_RANGE:
        ...
"""

from __future__ import annotations

from enum import Enum


class NameKind(str, Enum):
    """Representation context of a property name."""

    ENV = "env"
    CONF = "conf"
    CLI = "cli"


class DatatypeKind(str, Enum):
    """Datatypes a property value can be declared as."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    ARRAY = "array"


class Importance(str, Enum):
    """Role-independent requiredness of a property."""

    OPTIONAL = "optional"
    REQUIRED = "required"


class Severity(str, Enum):
    """Whether a finding blocks the configuration or is advisory."""

    ERROR = "error"
    WARNING = "warning"


class RangeEnd(str, Enum):
    """How a corpus interprets the ``to_version`` of a version range."""

    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


class FindingKind(str, Enum):
    """Stable identifiers for every finding the engine can produce."""

    UNKNOWN_PROPERTY = "UnknownProperty"
    DUPLICATE_PROPERTY = "DuplicateProperty"
    PROPERTY_NOT_YET_AVAILABLE = "PropertyNotYetAvailable"
    DEPRECATED_PROPERTY = "DeprecatedProperty"
    VALUE_MISSING = "ValueMissing"
    TYPE_MISMATCH = "TypeMismatch"
    OUT_OF_RANGE = "OutOfRange"
    TOO_LONG = "TooLong"
    TOO_SHORT = "TooShort"
    PATTERN_MISMATCH = "PatternMismatch"
    NOT_AN_ALLOWED_VALUE = "NotAnAllowedValue"
    PROPERTY_RETIRED = "PropertyRetired"
    MISSING_DEPENDENCY = "MissingDependency"
    UNSATISFIED_DEPENDENCY = "UnsatisfiedDependency"
    RESTART_REQUIRED = "RestartRequired"
    MISSING_REQUIRED_PROPERTY = "MissingRequiredProperty"


# Finding kinds produced by the datatype validator
DATATYPE_FINDING_KINDS = frozenset(
    {
        FindingKind.VALUE_MISSING,
        FindingKind.TYPE_MISMATCH,
        FindingKind.OUT_OF_RANGE,
        FindingKind.TOO_LONG,
        FindingKind.TOO_SHORT,
        FindingKind.PATTERN_MISMATCH,
    }
)

# Value lists for validation
NAME_KIND_VALUES = [k.value for k in NameKind]
DATATYPE_KIND_VALUES = [k.value for k in DatatypeKind]
IMPORTANCE_VALUES = [i.value for i in Importance]
SEVERITY_VALUES = [s.value for s in Severity]
RANGE_END_VALUES = [r.value for r in RangeEnd]
FINDING_KIND_VALUES = [k.value for k in FindingKind]
