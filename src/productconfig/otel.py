"""
OTel span event emission helpers for corpus loading and validation.

Usage::

    from productconfig.otel import emit_validation_result, emit_corpus_loaded

    emit_validation_result(report)
    emit_corpus_loaded("properties.yaml", corpus)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from productconfig._otel_helpers import add_span_event
from productconfig.findings import ValidationReport

if TYPE_CHECKING:
    from productconfig.corpus import PropertyCorpus

logger = logging.getLogger(__name__)


def emit_validation_result(report: ValidationReport) -> None:
    """Emit a span event summarising an instance validation.

    Event name: ``productconfig.validation.complete``
    """
    attrs: dict[str, str | int | float | bool] = {
        "productconfig.passed": report.passed,
        "productconfig.version": report.version,
        "productconfig.roles": ",".join(report.roles),
        "productconfig.total_checked": report.total_checked,
        "productconfig.errors": report.errors,
        "productconfig.warnings": report.warnings,
    }

    if report.passed:
        logger.debug(
            "Configuration validation passed: version=%s checked=%d warnings=%d",
            report.version,
            report.total_checked,
            report.warnings,
        )
    else:
        logger.warning(
            "Configuration validation FAILED: version=%s checked=%d errors=%d warnings=%d",
            report.version,
            report.total_checked,
            report.errors,
            report.warnings,
        )

    add_span_event("productconfig.validation.complete", attrs)


def emit_corpus_loaded(source: str, corpus: "PropertyCorpus") -> None:
    """Emit a span event for a successful corpus load.

    Event name: ``productconfig.corpus.loaded``
    """
    attrs: dict[str, str | int | float | bool] = {
        "productconfig.corpus.source": source,
        "productconfig.corpus.properties": len(corpus),
        "productconfig.corpus.units": len(corpus.units),
        "productconfig.corpus.range_end": corpus.range_end.value,
    }

    logger.info(
        "Property corpus loaded: source=%s properties=%d units=%d",
        source,
        len(corpus),
        len(corpus.units),
    )

    add_span_event("productconfig.corpus.loaded", attrs)
