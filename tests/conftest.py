"""
Pytest configuration and fixtures for productconfig tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Generator

import pytest

from productconfig.corpus import PropertyCorpus
from productconfig.loader import CorpusLoader
from productconfig.settings import reset_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_productconfig_env() -> Generator[None, None, None]:
    """Strip PRODUCTCONFIG_* variables and reset cached state around each test."""
    original: Dict[str, str] = {
        key: value for key, value in os.environ.items() if key.startswith("PRODUCTCONFIG_")
    }
    for key in original:
        del os.environ[key]
    reset_settings()
    CorpusLoader.clear_cache()

    yield

    for key in [k for k in os.environ if k.startswith("PRODUCTCONFIG_")]:
        del os.environ[key]
    os.environ.update(original)
    reset_settings()
    CorpusLoader.clear_cache()


# ============================================================================
# Corpus Fixtures
# ============================================================================


@pytest.fixture
def corpus_path() -> Path:
    """Path to the shared test corpus."""
    return FIXTURES_DIR / "property_corpus.yaml"


@pytest.fixture
def corpus(corpus_path: Path) -> PropertyCorpus:
    """The shared test corpus, loaded through the cached loader."""
    return CorpusLoader().load(corpus_path)
