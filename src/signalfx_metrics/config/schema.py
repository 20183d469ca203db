"""Config schema re-export and validation helpers for signalfx-metrics.

Shipped in this module
----------------------
- ReporterSettings          — re-export with full Pydantic v2 validation
- ReportingConfig           — re-export of the resolved config model
- validate_settings         — raw dict to ``ReporterSettings``
- validate_reporting_config — raw dict to ``ReportingConfig``
"""
from __future__ import annotations

from collections.abc import Mapping

from pydantic import ValidationError

from signalfx_metrics.schema.config import ReporterSettings, ReportingConfig
from signalfx_metrics.schema.errors import ConfigurationError

__all__ = [
    "ReporterSettings",
    "ReportingConfig",
    "validate_settings",
    "validate_reporting_config",
]


def validate_settings(data: Mapping[str, object]) -> ReporterSettings:
    """Validate a raw mapping against the ``ReporterSettings`` schema.

    Raises
    ------
    ConfigurationError
        If the data fails Pydantic validation.  The original
        ``ValidationError`` is attached as the ``__cause__``.

    Examples
    --------
    >>> validate_settings({"api_token": "abc"}).source_type.value
    'netbios'
    """
    try:
        return ReporterSettings.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid reporter settings: {exc}",
            context={"errors": exc.errors()},
        ) from exc


def validate_reporting_config(data: Mapping[str, object]) -> ReportingConfig:
    """Validate a raw mapping against the ``ReportingConfig`` schema.

    Raises
    ------
    ConfigurationError
        If the data fails Pydantic validation.
    """
    try:
        return ReportingConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid reporting configuration: {exc}",
            context={"errors": exc.errors()},
        ) from exc
