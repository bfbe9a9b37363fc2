"""
Span event helper for ``productconfig.otel``.

Events go to whatever span is current in the caller, typically the
request or startup span of the host application that loads a corpus or
validates a configuration.  Without a recording span (no SDK configured,
or sampling dropped the span) nothing is emitted.

Attribute values of ``None`` are dropped, since OpenTelemetry rejects them.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional, Union

from opentelemetry import trace as otel_trace

AttributeValue = Union[str, int, float, bool]


def add_span_event(name: str, attributes: Mapping[str, Optional[AttributeValue]]) -> bool:
    """Record ``name`` on the current span.

    Args:
        name: Event name, ``productconfig.validation.complete`` or
            ``productconfig.corpus.loaded``.
        attributes: Flat attribute mapping; ``None`` values are skipped.

    Returns:
        ``True`` if the event was recorded.
    """
    span = otel_trace.get_current_span()
    if not span.is_recording():
        return False
    span.add_event(
        name=name,
        attributes={key: value for key, value in attributes.items() if value is not None},
    )
    return True
