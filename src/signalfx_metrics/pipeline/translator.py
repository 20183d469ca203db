"""Snapshot-to-datapoint translation for signalfx-metrics.

A metric is reported as one or more *groups*: the metric itself, labelled
with the item labels it was created with, followed by one group per item
(sub-series) in registration order.  Each group yields one datapoint per
selected aggregation.  Names carry an aggregation suffix unless the metric
as a whole selects a single aggregation key, so every group of a metric
is named the same way.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from signalfx_metrics.pipeline.aggregations import select_aggregations
from signalfx_metrics.pipeline.dimensions import merge_dimensions
from signalfx_metrics.schema.snapshot import (
    Datapoint,
    DatapointType,
    MetricKind,
    MetricSnapshot,
    Number,
)

_CUMULATIVE_KINDS: frozenset[MetricKind] = frozenset(
    {MetricKind.COUNTER, MetricKind.METER, MetricKind.HISTOGRAM, MetricKind.TIMER}
)


def datapoint_type(kind: MetricKind, aggregation: str) -> DatapointType:
    """Wire bucket for one aggregation of a metric kind.

    Running counts are cumulative counters; everything else is a gauge.
    """
    if aggregation == "count" and kind in _CUMULATIVE_KINDS:
        return DatapointType.CUMULATIVE_COUNTER
    return DatapointType.GAUGE


def translate(
    snapshot: MetricSnapshot,
    base_dimensions: Mapping[str, str],
    source: str,
    timestamp: int,
    detail_set: Iterable[str] = (),
) -> list[Datapoint]:
    """Convert one metric snapshot into ordered datapoints.

    Parameters
    ----------
    snapshot:
        The metric to translate.  Not modified.
    base_dimensions:
        Default dimensions with ``source`` already merged in.
    source:
        Resolved source, re-applied when item labels are merged.
    timestamp:
        Cycle timestamp in epoch milliseconds.
    detail_set:
        Aggregation keys to emit; empty means the default set.

    Returns
    -------
    list[Datapoint]
        Metric group first, then item groups; aggregations in candidate
        order within each group.
    """
    detail = frozenset(detail_set)
    groups: list[tuple[tuple[str, ...], Mapping[str, Number]]] = [
        (snapshot.item_labels, snapshot.values)
    ]
    groups.extend(
        (snapshot.item_labels + item.labels, item.values) for item in snapshot.items
    )

    selections = [
        (labels, select_aggregations(snapshot.kind, values, detail))
        for labels, values in groups
    ]
    # One naming decision per metric keeps a series under one name across groups.
    bare = len({key for _, selected in selections for key, _ in selected}) == 1

    datapoints: list[Datapoint] = []
    for labels, selected in selections:
        if not selected:
            continue
        if labels:
            dimensions = merge_dimensions(base_dimensions, source, labels)
        else:
            dimensions = dict(base_dimensions)
        for key, value in selected:
            datapoints.append(
                Datapoint(
                    metric=snapshot.name if bare else f"{snapshot.name}.{key}",
                    value=value,
                    dimensions=dict(dimensions),
                    timestamp=timestamp,
                    metric_type=datapoint_type(snapshot.kind, key),
                )
            )
    return datapoints
