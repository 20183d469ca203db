"""Pipeline package for signalfx-metrics.

Pure functions that turn metric snapshots into size-bounded batches of
datapoints: dimension merging, aggregation selection, translation, and
chunking.
"""
from __future__ import annotations

from signalfx_metrics.pipeline.aggregations import (
    AGGREGATION_CANDIDATES,
    AGGREGATION_KEYS,
    select_aggregations,
)
from signalfx_metrics.pipeline.batcher import chunk, iter_chunks
from signalfx_metrics.pipeline.dimensions import merge_dimensions, parse_item_label
from signalfx_metrics.pipeline.translator import datapoint_type, translate

__all__ = [
    "AGGREGATION_CANDIDATES",
    "AGGREGATION_KEYS",
    "select_aggregations",
    "chunk",
    "iter_chunks",
    "merge_dimensions",
    "parse_item_label",
    "datapoint_type",
    "translate",
]
