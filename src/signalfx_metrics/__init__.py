"""signalfx-metrics — report an in-process metrics registry to SignalFx.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Quick-start
-----------
>>> import signalfx_metrics
>>> signalfx_metrics.__version__
'0.1.0'

>>> from signalfx_metrics import MetricsRegistry, ReporterBuilder
>>> registry = MetricsRegistry()
>>> registry.counter("requests").increment()
>>> reporter = ReporterBuilder("token", interval_seconds=10).with_source("host1").build(registry)
>>> [dp.metric for dp in reporter.collect()[1]]
['requests']
"""
from __future__ import annotations

__version__: str = "0.1.0"

from signalfx_metrics.convenience import create_reporter, start_reporting

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------
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

# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
from signalfx_metrics.pipeline.aggregations import select_aggregations
from signalfx_metrics.pipeline.batcher import chunk
from signalfx_metrics.pipeline.dimensions import merge_dimensions
from signalfx_metrics.pipeline.translator import translate

# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------
from signalfx_metrics.transport.transmitter import HttpTransmitter

# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------
from signalfx_metrics.reporting.reporter import BatchOutcome, CycleResult, SignalFxReporter
from signalfx_metrics.reporting.scheduler import ScheduledReporter

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
from signalfx_metrics.registry.metrics import Counter, Gauge, Histogram, Meter, Timer
from signalfx_metrics.registry.registry import MetricSource, MetricsRegistry

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------
from signalfx_metrics.builder import ReporterBuilder
from signalfx_metrics.config.loader import ConfigLoader
from signalfx_metrics.sources.resolver import resolve_config, resolve_source

__all__ = [
    "__version__",
    "create_reporter",
    "start_reporting",
    # schema — config
    "SourceType",
    "ReporterSettings",
    "ReportingConfig",
    # schema — errors
    "ErrorSeverity",
    "SignalFxMetricsError",
    "ConfigurationError",
    "EnrichmentError",
    "RegistryError",
    "TransmitError",
    "RejectedError",
    "UnavailableError",
    # schema — snapshots
    "MetricKind",
    "ItemSnapshot",
    "MetricSnapshot",
    "Datapoint",
    "DatapointType",
    # pipeline
    "merge_dimensions",
    "select_aggregations",
    "translate",
    "chunk",
    # transport
    "HttpTransmitter",
    # reporting
    "BatchOutcome",
    "CycleResult",
    "SignalFxReporter",
    "ScheduledReporter",
    # registry
    "MetricSource",
    "MetricsRegistry",
    "Counter",
    "Gauge",
    "Meter",
    "Histogram",
    "Timer",
    # setup
    "ReporterBuilder",
    "ConfigLoader",
    "resolve_config",
    "resolve_source",
]
