"""Reporter configuration schema for signalfx-metrics.

Two Pydantic v2 models sit between raw configuration sources (YAML files,
environment variables, in-memory dicts) and the reporting pipeline:

- ``ReporterSettings`` mirrors what a user writes down: it names *how* to
  find the source (``source_type``) and whether to look up the AWS
  instance id.
- ``ReportingConfig`` is the resolved, immutable value the pipeline runs
  on: the source is a concrete string and every enrichment is already
  folded into ``default_dimensions``.

Shipped in this module
----------------------
- SourceType        — how the ``source`` dimension is resolved
- ReporterSettings  — validated raw settings with file/env loaders
- ReportingConfig   — frozen, resolved configuration
"""
from __future__ import annotations

import json
import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import (
    AnyHttpUrl,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from signalfx_metrics.constants import (
    DATAPOINT_PATH,
    DEFAULT_BASE_URI,
    DEFAULT_DETAIL_SET,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_PREFIX,
    MAX_DATAPOINTS_PER_MESSAGE,
)
from signalfx_metrics.pipeline.aggregations import AGGREGATION_KEYS

_HTTP_URL: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


class SourceType(str, Enum):
    """Strategies for resolving the ``source`` dimension."""

    NETBIOS = "netbios"
    DNS = "dns"
    FQDN = "fqdn"
    CUSTOM = "custom"


class _ReportingFields(BaseModel):
    """Fields shared by settings and resolved config."""

    api_token: str = Field(min_length=1)
    interval_seconds: int = Field(default=DEFAULT_INTERVAL_SECONDS, ge=1)
    base_uri: str = Field(default=DEFAULT_BASE_URI, min_length=1)
    max_datapoints_per_message: int = Field(
        default=MAX_DATAPOINTS_PER_MESSAGE, ge=1, le=MAX_DATAPOINTS_PER_MESSAGE
    )
    default_dimensions: dict[str, str] = Field(default_factory=dict)
    detail_set: frozenset[str] = Field(default=DEFAULT_DETAIL_SET)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @field_validator("api_token")
    @classmethod
    def _strip_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("api_token must be non-empty")
        return value.strip()

    @field_validator("base_uri")
    @classmethod
    def _http_base_uri(cls, value: str) -> str:
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"base_uri must be an http(s) URL, got {value!r}") from exc
        return value.rstrip("/")

    @field_validator("detail_set")
    @classmethod
    def _known_aggregations(cls, value: frozenset[str]) -> frozenset[str]:
        unknown = sorted(value - AGGREGATION_KEYS)
        if unknown:
            raise ValueError(f"unknown aggregation keys in detail_set: {unknown}")
        return value


class ReporterSettings(_ReportingFields):
    """Validated reporter settings as written in a config file.

    Parameters
    ----------
    api_token:
        SignalFx ingest token.  Required, non-empty.
    interval_seconds:
        Reporting period; at least 1.
    base_uri:
        Ingest host as an http(s) URL; defaults to
        ``https://ingest.signalfx.com``.
    max_datapoints_per_message:
        Batch size limit in ``[1, 10000]``.
    default_dimensions:
        Static dimensions added to every datapoint.
    detail_set:
        Aggregation keys to emit.  Empty means ``{count, min, mean, max}``.
    timeout_seconds:
        Per-request HTTP timeout.
    source_type:
        One of ``netbios``, ``dns``, ``fqdn`` or ``custom``.
    source_value:
        Explicit source; required when ``source_type`` is ``custom``.
    aws_integration:
        When true, the AWS instance id is fetched once at setup and added
        as the ``InstanceId`` dimension.
    """

    model_config = {"extra": "forbid", "validate_assignment": True}

    source_type: SourceType = Field(default=SourceType.NETBIOS)
    source_value: str | None = Field(default=None)
    aws_integration: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _normalise_collections(cls, values: Any) -> Any:  # noqa: ANN401
        """Treat explicit ``None`` collections as empty."""
        if isinstance(values, dict):
            for key in ("default_dimensions", "detail_set"):
                if key in values and values[key] is None:
                    values[key] = {} if key == "default_dimensions" else []
        return values

    @model_validator(mode="after")
    def _custom_source_needs_value(self) -> "ReporterSettings":
        if self.source_type is SourceType.CUSTOM and not (self.source_value or "").strip():
            raise ValueError(
                "source_value must be set when source_type is 'custom'"
            )
        return self

    # ------------------------------------------------------------------
    # Class-method loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReporterSettings":
        """Load and validate settings from a YAML file.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        pydantic.ValidationError
            If the parsed data fails validation.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")
        with resolved.open(encoding="utf-8") as fh:
            raw: object = yaml.safe_load(fh)
        data: dict[str, object] = dict(raw) if isinstance(raw, dict) else {}
        return cls.model_validate(data)

    @classmethod
    def env_data(cls, prefix: str = ENV_PREFIX) -> dict[str, object]:
        """Collect raw settings from environment variables.

        Variables are mapped by stripping *prefix* and lower-casing the
        remainder, so ``SIGNALFX_API_TOKEN`` becomes ``api_token``.
        ``default_dimensions`` is read as a JSON object, ``detail_set`` as a
        comma-separated list, and ``aws_integration`` accepts ``true`` /
        ``1`` / ``yes`` as truthy.
        """
        data: dict[str, object] = {}
        for raw_key, raw_value in os.environ.items():
            if not raw_key.startswith(prefix):
                continue
            key = raw_key[len(prefix):].lower()
            if key not in cls.model_fields:
                continue
            if key == "aws_integration":
                data[key] = raw_value.lower() in {"true", "1", "yes"}
            elif key == "detail_set":
                data[key] = [item.strip() for item in raw_value.split(",") if item.strip()]
            elif key == "default_dimensions":
                try:
                    parsed = json.loads(raw_value)
                    data[key] = parsed if isinstance(parsed, dict) else {}
                except json.JSONDecodeError:
                    data[key] = {}
            else:
                data[key] = raw_value
        return data

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "ReporterSettings":
        """Build settings from environment variables; see :meth:`env_data`."""
        return cls.model_validate(cls.env_data(prefix))


class ReportingConfig(_ReportingFields):
    """Resolved, immutable configuration for one reporter process.

    Built once (by :func:`signalfx_metrics.sources.resolve_config` or the
    :class:`~signalfx_metrics.builder.ReporterBuilder`) and held for the
    process lifetime.  ``default_dimensions`` is a read-only copy of the
    mapping it was built from.

    Examples
    --------
    >>> cfg = ReportingConfig(api_token="t", default_source="host1")
    >>> cfg.datapoint_url
    'https://ingest.signalfx.com/v2/datapoint'
    """

    model_config = {"extra": "forbid", "frozen": True}

    default_source: str = Field(min_length=1)
    default_dimensions: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("default_dimensions")
    @classmethod
    def _read_only_dimensions(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("default_dimensions")
    def _dump_dimensions(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def datapoint_url(self) -> str:
        """Full URL batches are POSTed to."""
        return f"{self.base_uri}{DATAPOINT_PATH}"
