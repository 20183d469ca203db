"""Transport package for signalfx-metrics.

Wire encoding and HTTP delivery of datapoint batches.
"""
from __future__ import annotations

from signalfx_metrics.transport.serializer import CONTENT_TYPE, encode_batch, to_payload
from signalfx_metrics.transport.transmitter import TOKEN_HEADER, HttpTransmitter

__all__ = [
    "CONTENT_TYPE",
    "TOKEN_HEADER",
    "encode_batch",
    "to_payload",
    "HttpTransmitter",
]
