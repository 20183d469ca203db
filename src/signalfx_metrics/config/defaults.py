"""Default settings document for signalfx-metrics.

``DEFAULT_SETTINGS_YAML`` is the starter file written by
``signalfx-metrics init``.  Every value except the token matches the
``ReporterSettings`` defaults.
"""
from __future__ import annotations

from signalfx_metrics.constants import (
    DEFAULT_BASE_URI,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_DATAPOINTS_PER_MESSAGE,
)

DEFAULT_SETTINGS_YAML: str = f"""\
# signalfx-metrics configuration
api_token: "<your SignalFx ingest token>"
interval_seconds: {DEFAULT_INTERVAL_SECONDS}
base_uri: {DEFAULT_BASE_URI}
max_datapoints_per_message: {MAX_DATAPOINTS_PER_MESSAGE}
timeout_seconds: {DEFAULT_TIMEOUT_SECONDS}
# netbios | dns | fqdn | custom (custom needs source_value)
source_type: netbios
source_value: null
aws_integration: false
default_dimensions: {{}}
detail_set: [count, min, mean, max]
"""
