"""Unit tests for signalfx_metrics.pipeline.translator."""
from __future__ import annotations

import math

from signalfx_metrics.pipeline.dimensions import merge_dimensions
from signalfx_metrics.pipeline.translator import datapoint_type, translate
from signalfx_metrics.schema.snapshot import (
    DatapointType,
    ItemSnapshot,
    MetricKind,
    MetricSnapshot,
)

TS = 1_700_000_000_000
BASE = merge_dimensions({"environment": "prod"}, "host1")


class TestDatapointType:
    def test_counts_are_cumulative(self) -> None:
        for kind in (MetricKind.COUNTER, MetricKind.METER, MetricKind.TIMER, MetricKind.HISTOGRAM):
            assert datapoint_type(kind, "count") is DatapointType.CUMULATIVE_COUNTER

    def test_other_aggregations_are_gauges(self) -> None:
        assert datapoint_type(MetricKind.TIMER, "mean") is DatapointType.GAUGE
        assert datapoint_type(MetricKind.GAUGE, "value") is DatapointType.GAUGE


class TestTranslate:
    def test_timer_default_detail_set(self) -> None:
        snap = MetricSnapshot(
            name="api.use",
            kind=MetricKind.TIMER,
            values={"count": 5, "min": 1.0, "mean": 2.0, "max": 10.0},
        )
        points = translate(snap, BASE, "host1", TS)

        assert [(p.metric, p.value) for p in points] == [
            ("api.use.count", 5),
            ("api.use.min", 1.0),
            ("api.use.mean", 2.0),
            ("api.use.max", 10.0),
        ]
        for p in points:
            assert p.dimensions == {"environment": "prod", "source": "host1"}
            assert p.timestamp == TS

    def test_single_aggregation_uses_bare_name(self) -> None:
        snap = MetricSnapshot(name="requests", kind=MetricKind.COUNTER, values={"count": 3})
        points = translate(snap, BASE, "host1", TS)
        assert len(points) == 1
        assert points[0].metric == "requests"
        assert points[0].metric_type is DatapointType.CUMULATIVE_COUNTER

    def test_gauge_uses_bare_name(self) -> None:
        snap = MetricSnapshot(name="queue.depth", kind=MetricKind.GAUGE, values={"value": 12})
        points = translate(snap, BASE, "host1", TS)
        assert [(p.metric, p.value) for p in points] == [("queue.depth", 12)]

    def test_dimensions_are_copied_per_datapoint(self) -> None:
        snap = MetricSnapshot(
            name="api.use", kind=MetricKind.TIMER, values={"count": 1, "max": 2.0}
        )
        points = translate(snap, BASE, "host1", TS)
        points[0].dimensions["mutated"] = "yes"
        assert "mutated" not in points[1].dimensions
        assert "mutated" not in BASE

    def test_metric_item_labels_become_dimensions(self) -> None:
        snap = MetricSnapshot(
            name="logins",
            kind=MetricKind.COUNTER,
            values={"count": 2},
            item_labels=("api_type=login", "badlabel"),
        )
        points = translate(snap, BASE, "host1", TS)
        assert points[0].dimensions == {
            "environment": "prod",
            "source": "host1",
            "api_type": "login",
        }

    def test_items_follow_metric_group_in_order(self) -> None:
        snap = MetricSnapshot(
            name="api.calls",
            kind=MetricKind.COUNTER,
            values={"count": 5},
            items=(
                ItemSnapshot(labels=("api_type=login",), values={"count": 3, "percent": 60.0}),
                ItemSnapshot(labels=("api_type=search",), values={"count": 2, "percent": 40.0}),
            ),
        )
        points = translate(snap, BASE, "host1", TS, {"count", "percent"})

        assert [(p.metric, p.value, p.dimensions.get("api_type")) for p in points] == [
            ("api.calls.count", 5, None),
            ("api.calls.count", 3, "login"),
            ("api.calls.percent", 60.0, "login"),
            ("api.calls.count", 2, "search"),
            ("api.calls.percent", 40.0, "search"),
        ]

    def test_suffix_decided_once_per_metric(self) -> None:
        snap = MetricSnapshot(
            name="requests",
            kind=MetricKind.COUNTER,
            values={"count": 4},
            items=(ItemSnapshot(labels=("path=/a",), values={"count": 4, "percent": 100.0}),),
        )
        points = translate(snap, BASE, "host1", TS, {"count", "percent"})

        count_names = {p.metric for p in points if p.metric_type is DatapointType.CUMULATIVE_COUNTER}
        assert count_names == {"requests.count"}
        assert [p.metric for p in points] == [
            "requests.count",
            "requests.count",
            "requests.percent",
        ]

    def test_item_group_inherits_metric_labels(self) -> None:
        snap = MetricSnapshot(
            name="api.calls",
            kind=MetricKind.COUNTER,
            values={"count": 1},
            item_labels=("region=eu",),
            items=(ItemSnapshot(labels=("region=us", "api_type=x"), values={"count": 1}),),
        )
        points = translate(snap, BASE, "host1", TS)
        assert points[1].dimensions["region"] == "us"
        assert points[1].dimensions["api_type"] == "x"

    def test_group_with_nothing_selected_emits_nothing(self) -> None:
        snap = MetricSnapshot(name="empty", kind=MetricKind.TIMER, values={})
        assert translate(snap, BASE, "host1", TS) == []

    def test_nan_passes_through(self) -> None:
        snap = MetricSnapshot(name="broken", kind=MetricKind.GAUGE, values={"value": float("nan")})
        points = translate(snap, BASE, "host1", TS)
        assert len(points) == 1
        assert math.isnan(points[0].value)

    def test_translation_is_deterministic(self) -> None:
        snap = MetricSnapshot(
            name="api.use",
            kind=MetricKind.METER,
            values={"count": 4, "rate_mean": 0.5, "rate_1m": 0.25},
            items=(ItemSnapshot(labels=("k=v",), values={"count": 4, "percent": 100.0}),),
        )
        detail = {"rate_1m", "percent"}
        assert translate(snap, BASE, "host1", TS, detail) == translate(
            snap, BASE, "host1", TS, detail
        )

    def test_snapshot_is_not_modified(self) -> None:
        values = {"count": 1, "max": 3.0}
        snap = MetricSnapshot(name="m", kind=MetricKind.HISTOGRAM, values=values)
        translate(snap, BASE, "host1", TS)
        assert values == {"count": 1, "max": 3.0}
