"""Source and dimension resolution for signalfx-metrics.

Everything here runs once, at setup, before the first reporting cycle.  The
results are folded into an immutable
:class:`~signalfx_metrics.schema.config.ReportingConfig`; nothing is looked
up again on the reporting path.

Shipped in this module
----------------------
- netbios_name          — short host name, upper-cased
- dns_name              — host name as reported by the resolver
- fqdn_name             — fully qualified name, falling back to NetBIOS
- resolve_source        — dispatch on ``SourceType``
- fetch_aws_instance_id — one blocking EC2 metadata lookup
- resolve_config        — ``ReporterSettings`` -> ``ReportingConfig``
"""
from __future__ import annotations

import logging
import platform
import socket
from collections.abc import Callable

import httpx

from signalfx_metrics.config.schema import validate_reporting_config
from signalfx_metrics.constants import (
    AWS_INSTANCE_ID_URL,
    AWS_METADATA_TIMEOUT_SECONDS,
    INSTANCE_ID_DIMENSION,
)
from signalfx_metrics.schema.config import ReporterSettings, ReportingConfig, SourceType
from signalfx_metrics.schema.errors import ConfigurationError, EnrichmentError

logger = logging.getLogger(__name__)


def netbios_name() -> str:
    """Machine name without domain, upper-cased like a NetBIOS name."""
    return platform.node().split(".", 1)[0].upper()


def dns_name() -> str:
    return socket.gethostname()


def fqdn_name() -> str:
    """Fully qualified domain name of this host.

    Falls back to :func:`netbios_name` when the resolver cannot produce a
    dotted name.
    """
    try:
        fqdn = socket.getfqdn()
    except OSError:
        logger.warning("FQDN lookup failed; falling back to NetBIOS name", exc_info=True)
        return netbios_name()
    if "." not in fqdn or fqdn.startswith("localhost"):
        logger.info("No domain found for %r; falling back to NetBIOS name", fqdn)
        return netbios_name()
    return fqdn


def resolve_source(source_type: SourceType | str, source_value: str | None = None) -> str:
    """Resolve the ``source`` dimension.

    Raises
    ------
    ConfigurationError
        If *source_type* is unknown, ``custom`` is used without a value, or
        the lookup produced an empty name.
    """
    try:
        kind = SourceType(source_type)
    except ValueError as exc:
        raise ConfigurationError(
            f"source_type must be one of netbios, dns, fqdn or custom, got {source_type!r}",
            context={"source_type": source_type},
        ) from exc

    if kind is SourceType.NETBIOS:
        source = netbios_name()
    elif kind is SourceType.DNS:
        source = dns_name()
    elif kind is SourceType.FQDN:
        source = fqdn_name()
    else:
        source = (source_value or "").strip()
        if not source:
            raise ConfigurationError(
                "source_value must be set when source_type is 'custom'",
                context={"source_type": kind.value},
            )

    if not source:
        raise ConfigurationError(
            f"Could not resolve a {kind.value} source name for this host",
            context={"source_type": kind.value},
        )
    logger.debug("Resolved %s source: %s", kind.value, source)
    return source


def fetch_aws_instance_id(
    url: str = AWS_INSTANCE_ID_URL,
    timeout: float = AWS_METADATA_TIMEOUT_SECONDS,
    client: httpx.Client | None = None,
) -> str:
    """Read the EC2 instance id from the instance metadata service.

    Raises
    ------
    EnrichmentError
        If the request fails, returns a non-2xx status, or an empty body.
    """
    try:
        if client is None:
            with httpx.Client(timeout=timeout) as owned:
                response = owned.get(url)
        else:
            response = client.get(url, timeout=timeout)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise EnrichmentError(
            f"Could not fetch AWS instance id from {url}: {exc}",
            context={"url": url},
        ) from exc

    instance_id = response.text.strip()
    if not instance_id:
        raise EnrichmentError(
            f"AWS metadata service at {url} returned an empty instance id",
            context={"url": url},
        )
    logger.info("Resolved AWS instance id %s", instance_id)
    return instance_id


def resolve_config(
    settings: ReporterSettings,
    aws_fetch: Callable[[], str] | None = None,
) -> ReportingConfig:
    """Perform every setup-time lookup once and freeze the result.

    Parameters
    ----------
    settings:
        Validated raw settings.
    aws_fetch:
        Instance-id lookup used when ``settings.aws_integration`` is set.
        Defaults to :func:`fetch_aws_instance_id`.

    Raises
    ------
    ConfigurationError
        If the source cannot be resolved.
    EnrichmentError
        If the AWS lookup was requested and failed.
    """
    dimensions = dict(settings.default_dimensions)
    if settings.aws_integration:
        fetch = aws_fetch if aws_fetch is not None else fetch_aws_instance_id
        dimensions[INSTANCE_ID_DIMENSION] = fetch()
    source = resolve_source(settings.source_type, settings.source_value)

    return validate_reporting_config(
        {
            "api_token": settings.api_token,
            "interval_seconds": settings.interval_seconds,
            "base_uri": settings.base_uri,
            "max_datapoints_per_message": settings.max_datapoints_per_message,
            "default_dimensions": dimensions,
            "detail_set": settings.detail_set,
            "timeout_seconds": settings.timeout_seconds,
            "default_source": source,
        }
    )
