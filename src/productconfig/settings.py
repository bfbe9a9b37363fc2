"""
Centralized settings for productconfig.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (PRODUCTCONFIG_*)
3. .env file
4. Default values

Example:
    from productconfig.settings import get_settings

    settings = get_settings()
    print(settings.corpus_path)  # From PRODUCTCONFIG_CORPUS_PATH or None

    # Override at runtime
    settings = get_settings(report_restart_required=False)
"""

from __future__ import annotations

import logging
import os
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProductConfigSettings(BaseSettings):
    """
    Engine settings for productconfig.

    All settings can be overridden via environment variables
    prefixed with PRODUCTCONFIG_.

    Example:
        export PRODUCTCONFIG_CORPUS_PATH=/etc/product/properties.yaml
        export PRODUCTCONFIG_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="PRODUCTCONFIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    corpus_path: Optional[str] = Field(
        default=None,
        description="Corpus file loaded by get_corpus() when no path is given",
    )

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for the productconfig logger hierarchy",
    )

    verify_unit_examples: bool = Field(
        default=True,
        description="Fail corpus load when a unit's example does not match its pattern",
    )
    report_restart_required: bool = Field(
        default=True,
        description="Emit a RestartRequired warning for supplied restart-only properties",
    )
    unknown_property_severity: Literal["warning", "error"] = Field(
        default="warning",
        description="Severity of UnknownProperty findings",
    )

    @field_validator("corpus_path")
    @classmethod
    def expand_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and environment variables in paths."""
        if v is None:
            return v
        return os.path.expanduser(os.path.expandvars(v))

    def apply_log_level(self) -> None:
        """Set the configured level on the ``productconfig`` logger."""
        logging.getLogger("productconfig").setLevel(self.log_level.upper())


# Global singleton
_settings: Optional[ProductConfigSettings] = None


def get_settings(**overrides) -> ProductConfigSettings:
    """
    Get the global settings instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any settings value

    Returns:
        ProductConfigSettings instance
    """
    global _settings

    if overrides or _settings is None:
        _settings = ProductConfigSettings(**overrides)
        _settings.apply_log_level()

    return _settings


def reset_settings() -> None:
    """Reset the global settings (for testing)."""
    global _settings
    _settings = None
