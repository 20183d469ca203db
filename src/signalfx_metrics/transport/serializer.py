"""Wire encoding for the SignalFx ``/v2/datapoint`` JSON contract.

The body is a JSON object keyed by datapoint type, each holding a list of
``{"metric", "value", "dimensions", "timestamp"}`` records::

    {"gauge": [...], "cumulative_counter": [...]}

Only types present in the batch appear.  Records keep batch order within
their type.  Non-finite values are written as ``NaN`` / ``Infinity``
rather than dropped.
"""
from __future__ import annotations

import json
from collections.abc import Iterable

from signalfx_metrics.schema.snapshot import Datapoint

CONTENT_TYPE: str = "application/json"


def to_payload(batch: Iterable[Datapoint]) -> dict[str, list[dict[str, object]]]:
    """Group *batch* into the ``/v2/datapoint`` document structure."""
    payload: dict[str, list[dict[str, object]]] = {}
    for datapoint in batch:
        payload.setdefault(datapoint.metric_type.value, []).append(datapoint.to_dict())
    return payload


def encode_batch(batch: Iterable[Datapoint]) -> bytes:
    """Serialize *batch* to UTF-8 JSON bytes."""
    return json.dumps(to_payload(batch), separators=(",", ":")).encode("utf-8")
