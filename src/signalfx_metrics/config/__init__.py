"""Config package for signalfx-metrics.

Provides settings loading, validation, and the starter settings file.
"""
from __future__ import annotations

from signalfx_metrics.config.defaults import DEFAULT_SETTINGS_YAML
from signalfx_metrics.config.loader import ConfigLoader
from signalfx_metrics.config.schema import (
    ReporterSettings,
    ReportingConfig,
    validate_reporting_config,
    validate_settings,
)

__all__ = [
    "ReporterSettings",
    "ReportingConfig",
    "validate_settings",
    "validate_reporting_config",
    "ConfigLoader",
    "DEFAULT_SETTINGS_YAML",
]
