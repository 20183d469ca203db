"""Setup-time source and dimension resolution for signalfx-metrics."""
from __future__ import annotations

from signalfx_metrics.sources.resolver import (
    dns_name,
    fetch_aws_instance_id,
    fqdn_name,
    netbios_name,
    resolve_config,
    resolve_source,
)

__all__ = [
    "netbios_name",
    "dns_name",
    "fqdn_name",
    "resolve_source",
    "fetch_aws_instance_id",
    "resolve_config",
]
