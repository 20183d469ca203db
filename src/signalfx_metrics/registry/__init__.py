"""Registry package for signalfx-metrics.

Provides the ``MetricSource`` protocol the reporter consumes and a bundled
thread-safe in-process registry.
"""
from __future__ import annotations

from signalfx_metrics.registry.metrics import Counter, Gauge, Histogram, Meter, Timer
from signalfx_metrics.registry.registry import MetricSource, MetricsRegistry

__all__ = [
    "MetricSource",
    "MetricsRegistry",
    "Counter",
    "Gauge",
    "Meter",
    "Histogram",
    "Timer",
]
