"""
Corpus loader with per-path caching for property-specification files.

Reads a YAML (``.yaml``/``.yml``) or JSON (``.json``) corpus, validates it
against ``PropertyCorpusSpec`` and builds the integrity-checked
``PropertyCorpus``.  Every failure to read, parse or match the schema is
raised as ``CorpusLoadError`` carrying the file and the line or field
implicated; integrity failures propagate as ``CorpusIntegrityError``.

The first load of a path is guarded by a lock, so concurrent first use
from several threads builds the corpus exactly once.  Cached corpora are
immutable and shared.

Usage::

    from productconfig.loader import CorpusLoader, get_corpus

    corpus = CorpusLoader().load(Path("properties.yaml"))

    # Process-wide default corpus (PRODUCTCONFIG_CORPUS_PATH)
    corpus = get_corpus()
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

import yaml
from pydantic import ValidationError

from productconfig.corpus import PropertyCorpus
from productconfig.errors import CorpusLoadError
from productconfig.otel import emit_corpus_loaded
from productconfig.schema import PropertyCorpusSpec
from productconfig.settings import get_settings

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}
_JSON_SUFFIXES = {".json"}


def _parse_text(text: str, fmt: str, path: Optional[Path]) -> Any:
    """Decode ``text`` as YAML or JSON, mapping parser errors to ``CorpusLoadError``."""
    if fmt == "json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorpusLoadError(exc.msg, path=path, line=exc.lineno) from exc

    try:
        return yaml.safe_load(text)
    except yaml.MarkedYAMLError as exc:
        line = exc.problem_mark.line + 1 if exc.problem_mark is not None else None
        raise CorpusLoadError(
            str(exc.problem or exc.context or "invalid YAML"), path=path, line=line
        ) from exc
    except yaml.YAMLError as exc:
        raise CorpusLoadError(str(exc) or "invalid YAML", path=path) from exc


def _validate_schema(raw: Any, path: Optional[Path]) -> PropertyCorpusSpec:
    if raw is None:
        raise CorpusLoadError("corpus is empty", path=path)
    if not isinstance(raw, dict):
        raise CorpusLoadError(
            f"Expected a mapping at the corpus root, got {type(raw).__name__}",
            path=path,
        )
    try:
        return PropertyCorpusSpec.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        extra = f" (and {exc.error_count() - 1} more)" if exc.error_count() > 1 else ""
        raise CorpusLoadError(
            f"{first.get('msg', 'invalid value')}{extra}", path=path, field=field
        ) from exc


class CorpusLoader:
    """Loads and caches property corpora from YAML or JSON files.

    Args:
        verify_unit_examples: Override the ``verify_unit_examples`` setting.
    """

    _cache: ClassVar[dict[str, PropertyCorpus]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, verify_unit_examples: Optional[bool] = None) -> None:
        if verify_unit_examples is None:
            verify_unit_examples = get_settings().verify_unit_examples
        self._verify_unit_examples = verify_unit_examples

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the corpus cache (useful in tests)."""
        with cls._lock:
            cls._cache.clear()

    def load(self, path: Union[str, Path]) -> PropertyCorpus:
        """Load a corpus file, building it at most once per resolved path.

        Args:
            path: Path to the YAML or JSON corpus file.

        Returns:
            The shared ``PropertyCorpus`` for ``path``.

        Raises:
            CorpusLoadError: If the file is missing, has an unsupported
                extension, cannot be parsed or does not match the schema.
            CorpusIntegrityError: If the corpus is internally inconsistent.
        """
        path = Path(path)
        key = str(path.resolve())
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Corpus cache hit: %s", key)
            return cached

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            corpus = self._load_uncached(path)
            self._cache[key] = corpus

        emit_corpus_loaded(key, corpus)
        return corpus

    def load_from_string(self, text: str, fmt: str = "yaml") -> PropertyCorpus:
        """Build a corpus from YAML or JSON text (uncached; convenient for tests).

        Args:
            text: Corpus document.
            fmt: ``"yaml"`` or ``"json"``.
        """
        if fmt not in {"yaml", "json"}:
            raise CorpusLoadError(f"Unsupported corpus format: {fmt}")
        raw = _parse_text(text, fmt, None)
        return PropertyCorpus(
            _validate_schema(raw, None), verify_unit_examples=self._verify_unit_examples
        )

    def load_from_dict(self, raw: dict[str, Any]) -> PropertyCorpus:
        """Build a corpus from an already-decoded mapping (uncached)."""
        return PropertyCorpus(
            _validate_schema(raw, None), verify_unit_examples=self._verify_unit_examples
        )

    def _load_uncached(self, path: Path) -> PropertyCorpus:
        if not path.exists():
            raise CorpusLoadError("Corpus file not found", path=path)

        suffix = path.suffix.lower()
        if suffix in _YAML_SUFFIXES:
            fmt = "yaml"
        elif suffix in _JSON_SUFFIXES:
            fmt = "json"
        else:
            raise CorpusLoadError(f"Unsupported corpus format: {path.suffix}", path=path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CorpusLoadError(f"Cannot read corpus: {exc}", path=path) from exc

        spec = _validate_schema(_parse_text(text, fmt, path), path)
        corpus = PropertyCorpus(spec, verify_unit_examples=self._verify_unit_examples)
        logger.debug(
            "Loaded property corpus: path=%s, properties=%d, units=%d",
            path,
            len(corpus),
            len(corpus.units),
        )
        return corpus


def get_corpus(path: Optional[Union[str, Path]] = None) -> PropertyCorpus:
    """Return the process-wide corpus for ``path``.

    Falls back to the ``corpus_path`` setting (``PRODUCTCONFIG_CORPUS_PATH``).

    Raises:
        CorpusLoadError: If no path is given or configured, or loading fails.
    """
    if path is None:
        path = get_settings().corpus_path
    if path is None:
        raise CorpusLoadError("No corpus path given and PRODUCTCONFIG_CORPUS_PATH is not set")
    return CorpusLoader().load(path)
