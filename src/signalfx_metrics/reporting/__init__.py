"""Reporting package for signalfx-metrics.

The per-cycle reporter and the fixed-interval scheduler that drives it.
"""
from __future__ import annotations

from signalfx_metrics.reporting.reporter import (
    BatchOutcome,
    BatchSender,
    CycleResult,
    SignalFxReporter,
)
from signalfx_metrics.reporting.scheduler import ScheduledReporter

__all__ = [
    "BatchOutcome",
    "BatchSender",
    "CycleResult",
    "SignalFxReporter",
    "ScheduledReporter",
]
