"""
Product configuration validation against a property-specification corpus.

A corpus declares every configurable property of a product: its names,
datatype, bounds, unit pattern, version-scoped defaults, role
requirements, dependencies and deprecation.  The engine checks a supplied
configuration instance against it for a product version and a set of
roles, and reports every discrepancy as a ``Finding``.

Public API::

    from productconfig import (
        # Loading
        CorpusLoader,
        get_corpus,
        PropertyCorpus,
        # Validation
        ValidationEngine,
        validate,
        Finding,
        ValidationReport,
        # Enums
        FindingKind,
        Severity,
        # Errors
        CorpusLoadError,
        CorpusIntegrityError,
        UnknownUnit,
        InvalidVersionError,
    )
"""

from productconfig.corpus import PropertyCorpus, ResolvedProperty
from productconfig.errors import (
    CorpusError,
    CorpusIntegrityError,
    CorpusLoadError,
    InvalidVersionError,
    UnknownUnit,
)
from productconfig.findings import Finding, ValidationReport
from productconfig.loader import CorpusLoader, get_corpus
from productconfig.otel import emit_corpus_loaded, emit_validation_result
from productconfig.schema import PropertyCorpusSpec, PropertySpec
from productconfig.settings import ProductConfigSettings, get_settings, reset_settings
from productconfig.types import (
    DatatypeKind,
    FindingKind,
    Importance,
    NameKind,
    RangeEnd,
    Severity,
)
from productconfig.units import UnitRegistry
from productconfig.validator import ValidationEngine, validate
from productconfig.version import Version, VersionRange

__version__ = "0.3.0"

__all__ = [
    # Corpus
    "PropertyCorpus",
    "ResolvedProperty",
    "PropertyCorpusSpec",
    "PropertySpec",
    "UnitRegistry",
    "CorpusLoader",
    "get_corpus",
    # Validation
    "ValidationEngine",
    "validate",
    "Finding",
    "ValidationReport",
    # Versions
    "Version",
    "VersionRange",
    # Enums
    "DatatypeKind",
    "FindingKind",
    "Importance",
    "NameKind",
    "RangeEnd",
    "Severity",
    # Settings
    "ProductConfigSettings",
    "get_settings",
    "reset_settings",
    # Errors
    "CorpusError",
    "CorpusLoadError",
    "CorpusIntegrityError",
    "UnknownUnit",
    "InvalidVersionError",
    # OTel
    "emit_validation_result",
    "emit_corpus_loaded",
]
