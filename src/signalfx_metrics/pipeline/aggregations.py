"""Aggregation selection for signalfx-metrics.

Each :class:`~signalfx_metrics.schema.snapshot.MetricKind` has a fixed,
ordered list of candidate aggregation keys.  The selector walks that list
and keeps the keys the snapshot actually produced and the user asked for.

Shipped in this module
----------------------
- AGGREGATION_CANDIDATES — kind to ordered candidate keys
- AGGREGATION_KEYS       — every key any kind can produce
- ALWAYS_EMITTED         — keys reported whenever present
- select_aggregations    — the selector itself
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from signalfx_metrics.constants import DEFAULT_DETAIL_SET
from signalfx_metrics.schema.snapshot import MetricKind, Number

_PERCENTILES: tuple[str, ...] = ("median", "p75", "p95", "p98", "p99", "p999")
_RATES: tuple[str, ...] = ("rate_mean", "rate_1m", "rate_5m", "rate_15m")

AGGREGATION_CANDIDATES: dict[MetricKind, tuple[str, ...]] = {
    MetricKind.COUNTER: ("count", "percent"),
    MetricKind.GAUGE: ("value",),
    MetricKind.METER: ("count", *_RATES, "percent"),
    MetricKind.HISTOGRAM: ("count", "last", "min", "mean", "max", "stddev", *_PERCENTILES),
    MetricKind.TIMER: (
        "count",
        "active_sessions",
        "total_time",
        "min",
        "mean",
        "max",
        "stddev",
        *_PERCENTILES,
        *_RATES,
    ),
}

AGGREGATION_KEYS: frozenset[str] = frozenset(
    key for candidates in AGGREGATION_CANDIDATES.values() for key in candidates
)

# A gauge has a single reading; it is reported whatever the detail set says.
ALWAYS_EMITTED: frozenset[str] = DEFAULT_DETAIL_SET | {"value"}


def select_aggregations(
    kind: MetricKind,
    values: Mapping[str, Number],
    detail_set: Iterable[str] = (),
) -> list[tuple[str, Number]]:
    """Pick the aggregations of one metric that become datapoints.

    Parameters
    ----------
    kind:
        The metric kind; selects the candidate list.
    values:
        Aggregation key to number as produced by the registry.
    detail_set:
        Keys the user wants.  Empty means the default
        ``{count, min, mean, max}``.

    Returns
    -------
    list[tuple[str, Number]]
        ``(key, value)`` pairs in candidate order.  Candidates missing from
        *values* are skipped.

    Examples
    --------
    >>> select_aggregations(MetricKind.TIMER, {"max": 9, "count": 2, "p99": 8})
    [('count', 2), ('max', 9)]
    """
    wanted = frozenset(detail_set) or DEFAULT_DETAIL_SET
    selected: list[tuple[str, Number]] = []
    for key in AGGREGATION_CANDIDATES[kind]:
        if key not in values:
            continue
        if key in wanted or key in ALWAYS_EMITTED:
            selected.append((key, values[key]))
    return selected
