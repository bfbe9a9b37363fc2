"""
Datatype validation for raw configuration values.

Configuration values always arrive as strings.  ``validate_datatype``
checks one value against a declared ``Datatype``:

    - integer / float: must parse, and lie within ``min``/``max`` (inclusive)
    - string: length within ``min``/``max``, and full match of ``unit``
    - bool: ``true`` or ``false``, case-insensitive
    - array: any non-empty value

An empty value is ``ValueMissing`` for every datatype.

Parsing is strict: Python's ``int()``/``float()`` accept underscores,
surrounding whitespace, non-ASCII digits, ``nan`` and ``inf``, none of which
are valid configuration numbers.  A well-formed number too large to
represent is reported against the bound on its side, or as
``TypeMismatch`` when that side is unbounded.

The ``allowed_values`` membership check lives in the rule layer, not here.

Usage::

    from productconfig.datatype import validate_datatype

    result = validate_datatype("70000", spec.datatype, corpus.units)
    if not result.ok:
        print(result.kind, result.details)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from productconfig.schema import Datatype
from productconfig.types import DatatypeKind, FindingKind
from productconfig.units import UnitRegistry

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")
_BOOL_VALUES = {"true": True, "false": False}

Number = Union[int, float]


@dataclass(frozen=True)
class DatatypeResult:
    """Outcome of validating one value against a datatype."""

    ok: bool
    kind: Optional[FindingKind] = None
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls) -> "DatatypeResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: FindingKind, message: str, **details: Any) -> "DatatypeResult":
        return cls(ok=False, kind=kind, message=message, details=details)


def parse_integer(text: str) -> Optional[int]:
    if _INTEGER_RE.fullmatch(text) is None:
        return None
    try:
        return int(text)
    except ValueError:
        # beyond the interpreter's integer string conversion limit
        return None


def parse_float(text: str) -> Optional[float]:
    if _FLOAT_RE.fullmatch(text) is None:
        return None
    parsed = float(text)
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_bool(text: str) -> Optional[bool]:
    return _BOOL_VALUES.get(text.lower())


def parse_bound(datatype: Datatype, bound: str) -> Optional[Number]:
    """Parse a ``min``/``max`` bound for ``datatype``; ``None`` if malformed.

    String lengths are integers; numeric bounds use the datatype's kind.
    """
    if datatype.type == DatatypeKind.FLOAT:
        return parse_float(bound)
    return parse_integer(bound)


def _check_bounds(datatype: Datatype, measured: Number) -> Optional[tuple[str, Number]]:
    """Return the ``(bound_name, limit)`` violated by ``measured``, if any."""
    if datatype.min is not None:
        lower = parse_bound(datatype, datatype.min)
        if lower is not None and measured < lower:
            return "min", lower
    if datatype.max is not None:
        upper = parse_bound(datatype, datatype.max)
        if upper is not None and measured > upper:
            return "max", upper
    return None


def _oversized(value: str, datatype: Datatype) -> DatatypeResult:
    """Result for a well-formed number too large to represent."""
    bound = "min" if value.startswith("-") else "max"
    raw_limit = datatype.min if bound == "min" else datatype.max
    limit = parse_bound(datatype, raw_limit) if raw_limit is not None else None
    if limit is None:
        return DatatypeResult.failure(
            FindingKind.TYPE_MISMATCH,
            f"Value is not a representable {datatype.type.value}",
            expected=datatype.type.value,
            actual=value,
        )
    relation = "below minimum" if bound == "min" else "above maximum"
    return DatatypeResult.failure(
        FindingKind.OUT_OF_RANGE,
        f"Value is {relation} {limit}",
        bound=bound,
        limit=limit,
        actual=value,
    )


def _validate_number(value: str, datatype: Datatype) -> DatatypeResult:
    if datatype.type == DatatypeKind.FLOAT:
        parser, syntax = parse_float, _FLOAT_RE
    else:
        parser, syntax = parse_integer, _INTEGER_RE
    parsed = parser(value)
    if parsed is None:
        if syntax.fullmatch(value) is not None:
            return _oversized(value, datatype)
        return DatatypeResult.failure(
            FindingKind.TYPE_MISMATCH,
            f"Value '{value}' is not a valid {datatype.type.value}",
            expected=datatype.type.value,
            actual=value,
        )

    violated = _check_bounds(datatype, parsed)
    if violated is not None:
        bound, limit = violated
        relation = "below minimum" if bound == "min" else "above maximum"
        return DatatypeResult.failure(
            FindingKind.OUT_OF_RANGE,
            f"Value {value} is {relation} {limit}",
            bound=bound,
            limit=limit,
            actual=parsed,
        )
    return DatatypeResult.success()


def _validate_string(value: str, datatype: Datatype, units: UnitRegistry) -> DatatypeResult:
    length = len(value)
    violated = _check_bounds(datatype, length)
    if violated is not None:
        bound, limit = violated
        if bound == "max":
            return DatatypeResult.failure(
                FindingKind.TOO_LONG,
                f"Value is {length} characters long, maximum is {limit}",
                bound=bound,
                limit=limit,
                actual=length,
            )
        return DatatypeResult.failure(
            FindingKind.TOO_SHORT,
            f"Value is {length} characters long, minimum is {limit}",
            bound=bound,
            limit=limit,
            actual=length,
        )

    if datatype.unit is not None and not units.matches(datatype.unit, value):
        return DatatypeResult.failure(
            FindingKind.PATTERN_MISMATCH,
            f"Value '{value}' does not match unit '{datatype.unit}'",
            unit=datatype.unit,
            actual=value,
        )
    return DatatypeResult.success()


def _validate_bool(value: str) -> DatatypeResult:
    if parse_bool(value) is None:
        return DatatypeResult.failure(
            FindingKind.TYPE_MISMATCH,
            f"Value '{value}' is not a valid bool (expected true or false)",
            expected=DatatypeKind.BOOL.value,
            actual=value,
        )
    return DatatypeResult.success()


def validate_datatype(value: str, datatype: Datatype, units: UnitRegistry) -> DatatypeResult:
    """Validate ``value`` against ``datatype``.

    Args:
        value: Raw configuration value.
        datatype: Declared datatype of the property.
        units: Registry used when a string datatype names a unit.

    Returns:
        ``DatatypeResult``; ``ok`` is ``False`` with ``kind`` set to one of
        ``ValueMissing``, ``TypeMismatch``, ``OutOfRange``, ``TooLong``,
        ``TooShort`` or ``PatternMismatch`` on failure.

    Raises:
        UnknownUnit: If a string datatype names an unregistered unit.
            Units are resolved at corpus load, so a loaded corpus never
            triggers this.
    """
    if value == "":
        return DatatypeResult.failure(FindingKind.VALUE_MISSING, "Value is empty")
    if datatype.type in (DatatypeKind.INTEGER, DatatypeKind.FLOAT):
        return _validate_number(value, datatype)
    if datatype.type == DatatypeKind.STRING:
        return _validate_string(value, datatype, units)
    if datatype.type == DatatypeKind.BOOL:
        return _validate_bool(value)
    # array values carry no structure to check beyond presence
    return DatatypeResult.success()
