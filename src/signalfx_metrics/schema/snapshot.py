"""Snapshot and datapoint value types for signalfx-metrics.

A reporting cycle reads :class:`MetricSnapshot` objects from a metric
source and turns them into :class:`Datapoint` records ready for the wire.
Both are immutable; neither survives past the cycle that produced it.

Shipped in this module
----------------------
- MetricKind     — closed set of metric kinds
- DatapointType  — SignalFx wire bucket for a datapoint
- ItemSnapshot   — one tagged sub-series of a metric
- MetricSnapshot — the aggregated state of one metric at one instant
- Datapoint      — one (metric, value, dimensions, timestamp) record
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

Number = Union[int, float]


class MetricKind(str, Enum):
    """Kinds of metric a registry can hold."""

    COUNTER = "counter"
    GAUGE = "gauge"
    METER = "meter"
    HISTOGRAM = "histogram"
    TIMER = "timer"


class DatapointType(str, Enum):
    """Top-level keys of the ``/v2/datapoint`` JSON body."""

    GAUGE = "gauge"
    COUNTER = "counter"
    CUMULATIVE_COUNTER = "cumulative_counter"


@dataclass(frozen=True)
class ItemSnapshot:
    """Aggregated values of one item of a counter or meter.

    Attributes
    ----------
    labels:
        Ordered ``key=value`` strings identifying the item, e.g.
        ``("api_type=login",)``.  Free-form tags without ``=`` are allowed
        and carried along; they never become dimensions.
    values:
        Aggregation key to number, e.g. ``{"count": 3, "percent": 60.0}``.
    """

    labels: tuple[str, ...]
    values: Mapping[str, Number]


@dataclass(frozen=True)
class MetricSnapshot:
    """Aggregated state of a single metric, read once per cycle.

    Attributes
    ----------
    name:
        Dot-delimited metric name, e.g. ``"api.use"``.
    kind:
        The :class:`MetricKind` that produced the values.
    values:
        Aggregation key to number.  Which keys exist depends on ``kind``.
    item_labels:
        Ordered ``key=value`` strings attached when the metric was created.
    items:
        Per-item sub-series in registration order.  Empty for untagged
        metrics.
    """

    name: str
    kind: MetricKind
    values: Mapping[str, Number]
    item_labels: tuple[str, ...] = ()
    items: tuple[ItemSnapshot, ...] = ()


@dataclass(frozen=True)
class Datapoint:
    """A single measurement destined for the ingestion endpoint.

    Attributes
    ----------
    metric:
        Metric name, possibly suffixed with an aggregation key
        (``"api.use.mean"``).
    value:
        Numeric value, passed through from the snapshot unmodified.
    dimensions:
        Label set owned by this datapoint.
    timestamp:
        Milliseconds since the epoch; shared by every datapoint of a cycle.
    metric_type:
        Which wire bucket the record belongs to.
    """

    metric: str
    value: Number
    dimensions: dict[str, str] = field(default_factory=dict)
    timestamp: int = 0
    metric_type: DatapointType = DatapointType.GAUGE

    def to_dict(self) -> dict[str, object]:
        """Return the wire record for this datapoint."""
        return {
            "metric": self.metric,
            "value": self.value,
            "dimensions": dict(self.dimensions),
            "timestamp": self.timestamp,
        }
