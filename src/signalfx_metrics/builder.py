"""Fluent setup API for signalfx-metrics.

``ReporterBuilder`` collects settings call by call and validates them once,
in :meth:`ReporterBuilder.build_config`, producing an immutable
:class:`~signalfx_metrics.schema.config.ReportingConfig`.  Host lookups run
when the corresponding ``with_*_source`` method is called, never on the
reporting path.

Example
-------
::

    from signalfx_metrics import MetricsRegistry, ReporterBuilder

    registry = MetricsRegistry()
    scheduled = (
        ReporterBuilder("my-token", interval_seconds=10)
        .with_default_dimensions({"environment": "prod"})
        .with_dns_source()
        .build_scheduled(registry)
    )
    scheduled.start()
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

import httpx

from signalfx_metrics.config.schema import validate_reporting_config
from signalfx_metrics.constants import (
    DEFAULT_BASE_URI,
    DEFAULT_DETAIL_SET,
    DEFAULT_TIMEOUT_SECONDS,
    INSTANCE_ID_DIMENSION,
    MAX_DATAPOINTS_PER_MESSAGE,
)
from signalfx_metrics.registry.registry import MetricSource
from signalfx_metrics.reporting.reporter import SignalFxReporter
from signalfx_metrics.reporting.scheduler import ScheduledReporter
from signalfx_metrics.schema.config import ReportingConfig
from signalfx_metrics.sources.resolver import (
    dns_name,
    fetch_aws_instance_id,
    fqdn_name,
    netbios_name,
)
from signalfx_metrics.transport.transmitter import HttpTransmitter


class ReporterBuilder:
    """Accumulates reporter settings; every ``with_*`` method returns ``self``.

    Parameters
    ----------
    api_token:
        SignalFx ingest token.
    interval_seconds:
        Reporting period used by :meth:`build_scheduled`.
    """

    def __init__(self, api_token: str, interval_seconds: int) -> None:
        self._api_token = api_token
        self._interval_seconds = interval_seconds
        self._default_dimensions: dict[str, str] = {}
        self._base_uri = DEFAULT_BASE_URI
        self._max_datapoints_per_message = MAX_DATAPOINTS_PER_MESSAGE
        self._source: str | None = None
        self._detail_set: frozenset[str] = DEFAULT_DETAIL_SET
        self._timeout_seconds = DEFAULT_TIMEOUT_SECONDS

    # ------------------------------------------------------------------
    # Fluent setters
    # ------------------------------------------------------------------

    def with_default_dimensions(self, dimensions: Mapping[str, str]) -> "ReporterBuilder":
        """Add dimensions sent with every datapoint; later calls add to earlier ones."""
        self._default_dimensions.update(dimensions)
        return self

    def with_base_uri(self, base_uri: str) -> "ReporterBuilder":
        self._base_uri = base_uri
        return self

    def with_max_datapoints_per_message(self, limit: int) -> "ReporterBuilder":
        self._max_datapoints_per_message = limit
        return self

    def with_detail_set(self, keys: Iterable[str]) -> "ReporterBuilder":
        """Choose which aggregations are emitted, e.g. ``["count", "p99"]``."""
        self._detail_set = frozenset(keys)
        return self

    def with_timeout(self, seconds: float) -> "ReporterBuilder":
        self._timeout_seconds = seconds
        return self

    def with_source(self, source: str) -> "ReporterBuilder":
        self._source = source
        return self

    def with_netbios_source(self) -> "ReporterBuilder":
        return self.with_source(netbios_name())

    def with_dns_source(self) -> "ReporterBuilder":
        """Use the resolver's host name as source."""
        return self.with_source(dns_name())

    def with_fqdn_source(self) -> "ReporterBuilder":
        """Use the fully qualified name, falling back to the NetBIOS name."""
        return self.with_source(fqdn_name())

    def with_aws_instance_id_dimension(
        self, fetch: Callable[[], str] | None = None
    ) -> "ReporterBuilder":
        """Look up the AWS instance id now and add it as ``InstanceId``.

        Raises
        ------
        EnrichmentError
            If the lookup fails.
        """
        instance_id = fetch() if fetch is not None else fetch_aws_instance_id()
        self._default_dimensions[INSTANCE_ID_DIMENSION] = instance_id
        return self

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build_config(self) -> ReportingConfig:
        """Validate everything collected so far.

        A builder with no source configured uses the NetBIOS name.

        Raises
        ------
        ConfigurationError
            If any setting is invalid.
        """
        source = self._source if self._source is not None else netbios_name()
        return validate_reporting_config(
            {
                "api_token": self._api_token,
                "interval_seconds": self._interval_seconds,
                "base_uri": self._base_uri,
                "max_datapoints_per_message": self._max_datapoints_per_message,
                "default_dimensions": dict(self._default_dimensions),
                "detail_set": self._detail_set,
                "timeout_seconds": self._timeout_seconds,
                "default_source": source,
            }
        )

    def build(
        self,
        source: MetricSource,
        client: httpx.Client | None = None,
    ) -> SignalFxReporter:
        """Build a reporter that reads *source* and sends over HTTP."""
        config = self.build_config()
        return SignalFxReporter(config, source, HttpTransmitter(config, client=client))

    def build_scheduled(
        self,
        source: MetricSource,
        client: httpx.Client | None = None,
    ) -> ScheduledReporter:
        """Build a reporter wrapped in a not-yet-started scheduler."""
        reporter = self.build(source, client=client)
        return ScheduledReporter(reporter, reporter.config.interval_seconds)

    def __repr__(self) -> str:
        return (
            f"ReporterBuilder(base_uri={self._base_uri!r}, "
            f"source={self._source!r}, interval={self._interval_seconds})"
        )
