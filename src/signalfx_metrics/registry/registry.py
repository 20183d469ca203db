"""In-process metrics registry for signalfx-metrics.

The reporter only needs something that satisfies :class:`MetricSource`.
:class:`MetricsRegistry` is the bundled implementation: a thread-safe,
name-keyed store of counters, gauges, meters, histograms and timers.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar, Union, runtime_checkable

from signalfx_metrics.registry.metrics import Clock, Counter, Gauge, Histogram, Meter, Timer
from signalfx_metrics.schema.errors import RegistryError
from signalfx_metrics.schema.snapshot import MetricSnapshot, Number

logger = logging.getLogger(__name__)

Metric = Union[Counter, Gauge, Meter, Histogram, Timer]
_M = TypeVar("_M", Counter, Gauge, Meter, Histogram, Timer)


@runtime_checkable
class MetricSource(Protocol):
    """Anything that can hand the reporter a snapshot of its metrics."""

    def snapshot(self) -> Sequence[MetricSnapshot]:
        """Return every metric's current state in a stable order."""
        ...


class MetricsRegistry:
    """Thread-safe registry of named metrics.

    Asking twice for the same name and kind returns the same metric; asking
    for an existing name as a different kind raises ``RegistryError``.

    Parameters
    ----------
    clock:
        Monotonic clock handed to meters and timers.

    Examples
    --------
    >>> registry = MetricsRegistry()
    >>> registry.counter("requests").increment()
    >>> [s.name for s in registry.snapshot()]
    ['requests']
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._metrics: dict[str, Metric] = {}

    def _get_or_create(self, name: str, kind: type[_M], factory: Callable[[], _M]) -> _M:
        with self._lock:
            existing = self._metrics.get(name)
            if existing is None:
                metric = factory()
                self._metrics[name] = metric
                logger.debug("Registered %s %s", kind.__name__.lower(), name)
                return metric
        if not isinstance(existing, kind):
            raise RegistryError(
                f"Metric {name!r} is already registered as a {existing.kind.value}",
                context={"name": name, "requested": kind.__name__.lower()},
            )
        return existing

    def counter(self, name: str, item_labels: Sequence[str] = ()) -> Counter:
        return self._get_or_create(name, Counter, lambda: Counter(name, item_labels))

    def gauge(
        self,
        name: str,
        fn: Callable[[], Number],
        item_labels: Sequence[str] = (),
    ) -> Gauge:
        return self._get_or_create(name, Gauge, lambda: Gauge(name, fn, item_labels))

    def meter(self, name: str, item_labels: Sequence[str] = ()) -> Meter:
        return self._get_or_create(
            name, Meter, lambda: Meter(name, item_labels, clock=self._clock)
        )

    def histogram(self, name: str, item_labels: Sequence[str] = ()) -> Histogram:
        return self._get_or_create(name, Histogram, lambda: Histogram(name, item_labels))

    def timer(self, name: str, item_labels: Sequence[str] = ()) -> Timer:
        return self._get_or_create(
            name, Timer, lambda: Timer(name, item_labels, clock=self._clock)
        )

    def remove(self, name: str) -> bool:
        """Unregister *name*; returns whether it existed."""
        with self._lock:
            return self._metrics.pop(name, None) is not None

    def snapshot(self) -> list[MetricSnapshot]:
        """Snapshot every metric in registration order."""
        with self._lock:
            metrics = list(self._metrics.values())
        return [metric.snapshot() for metric in metrics]

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def __repr__(self) -> str:
        return f"MetricsRegistry(metrics={len(self)})"
