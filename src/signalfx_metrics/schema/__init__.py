"""Schema package for signalfx-metrics.

Exports the value types, the error taxonomy, and the validated
configuration models.
"""
from __future__ import annotations

from signalfx_metrics.schema.config import ReporterSettings, ReportingConfig, SourceType
from signalfx_metrics.schema.errors import (
    ConfigurationError,
    EnrichmentError,
    ErrorSeverity,
    RegistryError,
    RejectedError,
    SignalFxMetricsError,
    TransmitError,
    UnavailableError,
)
from signalfx_metrics.schema.snapshot import (
    Datapoint,
    DatapointType,
    ItemSnapshot,
    MetricKind,
    MetricSnapshot,
)

__all__ = [
    # Snapshots
    "MetricKind",
    "ItemSnapshot",
    "MetricSnapshot",
    "Datapoint",
    "DatapointType",
    # Errors
    "ErrorSeverity",
    "SignalFxMetricsError",
    "ConfigurationError",
    "EnrichmentError",
    "RegistryError",
    "TransmitError",
    "RejectedError",
    "UnavailableError",
    # Config
    "SourceType",
    "ReporterSettings",
    "ReportingConfig",
]
