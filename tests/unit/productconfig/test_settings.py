"""Tests for productconfig settings."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from productconfig.settings import ProductConfigSettings, get_settings, reset_settings


class TestSettings:
    def test_defaults(self):
        settings = ProductConfigSettings()
        assert settings.corpus_path is None
        assert settings.log_level == "info"
        assert settings.verify_unit_examples is True
        assert settings.report_restart_required is True
        assert settings.unknown_property_severity == "warning"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PRODUCTCONFIG_UNKNOWN_PROPERTY_SEVERITY", "error")
        monkeypatch.setenv("PRODUCTCONFIG_REPORT_RESTART_REQUIRED", "false")
        settings = ProductConfigSettings()
        assert settings.unknown_property_severity == "error"
        assert settings.report_restart_required is False

    def test_invalid_value_rejected(self):
        with pytest.raises(ValidationError):
            ProductConfigSettings(unknown_property_severity="fatal")

    def test_corpus_path_expanded(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("CORPUS_DIR", "/etc/product")
        settings = ProductConfigSettings(corpus_path="$CORPUS_DIR/properties.yaml")
        assert settings.corpus_path == "/etc/product/properties.yaml"

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_overrides_replace_singleton(self):
        first = get_settings()
        second = get_settings(report_restart_required=False)
        assert second is not first
        assert get_settings() is second
        reset_settings()
        assert get_settings().report_restart_required is True

    def test_log_level_applied(self):
        get_settings(log_level="debug")
        assert logging.getLogger("productconfig").level == logging.DEBUG
        get_settings(log_level="warning")
        assert logging.getLogger("productconfig").level == logging.WARNING
