"""Constants shared across signalfx-metrics."""
from __future__ import annotations

DEFAULT_BASE_URI: str = "https://ingest.signalfx.com"
DATAPOINT_PATH: str = "/v2/datapoint"
MAX_DATAPOINTS_PER_MESSAGE: int = 10000
DEFAULT_INTERVAL_SECONDS: int = 10
DEFAULT_TIMEOUT_SECONDS: float = 30.0

DEFAULT_DETAIL_SET: frozenset[str] = frozenset({"count", "min", "mean", "max"})
"""Aggregations emitted when the configured detail set is empty."""

INSTANCE_ID_DIMENSION: str = "InstanceId"
AWS_INSTANCE_ID_URL: str = "http://169.254.169.254/latest/meta-data/instance-id"
AWS_METADATA_TIMEOUT_SECONDS: float = 60.0

SOURCE_DIMENSION: str = "source"
ENV_PREFIX: str = "SIGNALFX_"
