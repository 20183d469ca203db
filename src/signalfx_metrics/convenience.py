"""Convenience API for signalfx-metrics — start reporting in three lines.

Example
-------
::

    from signalfx_metrics import MetricsRegistry, start_reporting
    registry = MetricsRegistry()
    scheduled = start_reporting(registry)   # reads signalfx.yaml / SIGNALFX_* env

"""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx

from signalfx_metrics.registry.registry import MetricSource
from signalfx_metrics.reporting.reporter import SignalFxReporter
from signalfx_metrics.reporting.scheduler import ScheduledReporter
from signalfx_metrics.schema.config import ReporterSettings, ReportingConfig


def create_reporter(
    config: ReporterSettings | ReportingConfig,
    source: MetricSource,
    client: httpx.Client | None = None,
    aws_fetch: Callable[[], str] | None = None,
) -> SignalFxReporter:
    """Build a reporter from settings or an already resolved config.

    ``ReporterSettings`` are resolved first (source lookup, optional AWS
    lookup); a ``ReportingConfig`` is used as is.
    """
    from signalfx_metrics.sources.resolver import resolve_config
    from signalfx_metrics.transport.transmitter import HttpTransmitter

    if isinstance(config, ReporterSettings):
        config = resolve_config(config, aws_fetch=aws_fetch)
    return SignalFxReporter(config, source, HttpTransmitter(config, client=client))


def start_reporting(
    source: MetricSource,
    settings: ReporterSettings | None = None,
    search_dir: str | Path | None = None,
) -> ScheduledReporter:
    """Load settings (auto-discovered when not given), then start reporting.

    Raises
    ------
    ConfigurationError
        If no valid settings can be found or resolved.
    """
    if settings is None:
        from signalfx_metrics.config.loader import ConfigLoader

        settings = ConfigLoader().load_auto(search_dir=search_dir)
    reporter = create_reporter(settings, source)
    scheduled = ScheduledReporter(reporter, reporter.config.interval_seconds)
    scheduled.start()
    return scheduled
