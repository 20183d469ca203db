"""Metric implementations for the signalfx-metrics registry.

Each metric keeps its own lock and exposes ``snapshot()``, returning an
immutable :class:`~signalfx_metrics.schema.snapshot.MetricSnapshot`.

Shipped in this module
----------------------
- Counter   — running total, optionally broken down per item
- Gauge     — value read from a callback at snapshot time
- Meter     — event count plus mean and 1/5/15-minute EWMA rates, per item
- Histogram — uniform-reservoir distribution statistics
- Timer     — histogram of durations (ms) plus a meter of calls
"""
from __future__ import annotations

import logging
import math
import random
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Union

from signalfx_metrics.schema.snapshot import ItemSnapshot, MetricKind, MetricSnapshot, Number

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
ItemKey = Union[str, Sequence[str]]

_TICK_INTERVAL = 5.0
_DEFAULT_RESERVOIR_SIZE = 1028


def _item_labels(item: ItemKey) -> tuple[str, ...]:
    return (item,) if isinstance(item, str) else tuple(item)


def _percent(part: int, total: int) -> float:
    return 100.0 * part / total if total else 0.0


def _quantile(ordered: Sequence[float], q: float) -> float:
    """Interpolated quantile of an already sorted sequence."""
    if not ordered:
        return 0.0
    pos = q * (len(ordered) + 1)
    if pos < 1:
        return float(ordered[0])
    if pos >= len(ordered):
        return float(ordered[-1])
    lower = ordered[int(pos) - 1]
    upper = ordered[int(pos)]
    return float(lower + (pos - math.floor(pos)) * (upper - lower))


class Counter:
    """A running total, optionally broken down per item.

    Examples
    --------
    >>> c = Counter("requests")
    >>> c.increment(item="api_type=login")
    >>> c.increment(3, item="api_type=search")
    >>> c.snapshot().values["count"]
    4
    """

    kind = MetricKind.COUNTER

    def __init__(self, name: str, item_labels: Sequence[str] = ()) -> None:
        self.name = name
        self.item_labels = tuple(item_labels)
        self._lock = threading.Lock()
        self._count = 0
        self._items: dict[tuple[str, ...], int] = {}

    def increment(self, amount: int = 1, item: ItemKey | None = None) -> None:
        with self._lock:
            self._count += amount
            if item is not None:
                key = _item_labels(item)
                self._items[key] = self._items.get(key, 0) + amount

    def decrement(self, amount: int = 1, item: ItemKey | None = None) -> None:
        self.increment(-amount, item)

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._items.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def snapshot(self) -> MetricSnapshot:
        with self._lock:
            count = self._count
            items = list(self._items.items())
        return MetricSnapshot(
            name=self.name,
            kind=self.kind,
            values={"count": count},
            item_labels=self.item_labels,
            items=tuple(
                ItemSnapshot(labels=key, values={"count": c, "percent": _percent(c, count)})
                for key, c in items
            ),
        )


class Gauge:
    """A value read from *fn* each time the gauge is snapshotted.

    A callback that raises yields ``NaN`` for that cycle.
    """

    kind = MetricKind.GAUGE

    def __init__(
        self,
        name: str,
        fn: Callable[[], Number],
        item_labels: Sequence[str] = (),
    ) -> None:
        self.name = name
        self.item_labels = tuple(item_labels)
        self._fn = fn

    @property
    def value(self) -> Number:
        try:
            return self._fn()
        except Exception:  # noqa: BLE001
            logger.exception("Gauge %s callback failed; reporting NaN", self.name)
            return float("nan")

    def snapshot(self) -> MetricSnapshot:
        return MetricSnapshot(
            name=self.name,
            kind=self.kind,
            values={"value": self.value},
            item_labels=self.item_labels,
        )


class _EWMA:
    """Exponentially weighted moving rate, ticked every five seconds."""

    def __init__(self, minutes: int) -> None:
        self._alpha = 1.0 - math.exp(-_TICK_INTERVAL / 60.0 / minutes)
        self._uncounted = 0
        self._rate = 0.0
        self._initialised = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant = self._uncounted / _TICK_INTERVAL
        self._uncounted = 0
        if self._initialised:
            self._rate += self._alpha * (instant - self._rate)
        else:
            self._rate = instant
            self._initialised = True

    @property
    def rate(self) -> float:
        """Events per second."""
        return self._rate


class _MeterCore:
    """Unlocked meter state; the owning metric serialises access."""

    def __init__(self, now: float) -> None:
        self.count = 0
        self.start = now
        self.last_tick = now
        self.m1 = _EWMA(1)
        self.m5 = _EWMA(5)
        self.m15 = _EWMA(15)

    def catch_up(self, now: float) -> None:
        while now - self.last_tick >= _TICK_INTERVAL:
            self.last_tick += _TICK_INTERVAL
            self.m1.tick()
            self.m5.tick()
            self.m15.tick()

    def mark(self, n: int, now: float) -> None:
        self.catch_up(now)
        self.count += n
        self.m1.update(n)
        self.m5.update(n)
        self.m15.update(n)

    def values(self, now: float) -> dict[str, Number]:
        self.catch_up(now)
        elapsed = now - self.start
        return {
            "count": self.count,
            "rate_mean": self.count / elapsed if elapsed > 0 else 0.0,
            "rate_1m": self.m1.rate,
            "rate_5m": self.m5.rate,
            "rate_15m": self.m15.rate,
        }


class Meter:
    """Counts events and tracks their rate in events per second."""

    kind = MetricKind.METER

    def __init__(
        self,
        name: str,
        item_labels: Sequence[str] = (),
        clock: Clock = time.monotonic,
    ) -> None:
        self.name = name
        self.item_labels = tuple(item_labels)
        self._clock = clock
        self._lock = threading.Lock()
        self._core = _MeterCore(clock())
        self._items: dict[tuple[str, ...], _MeterCore] = {}

    def mark(self, amount: int = 1, item: ItemKey | None = None) -> None:
        now = self._clock()
        with self._lock:
            self._core.mark(amount, now)
            if item is not None:
                key = _item_labels(item)
                if key not in self._items:
                    self._items[key] = _MeterCore(now)
                self._items[key].mark(amount, now)

    @property
    def count(self) -> int:
        with self._lock:
            return self._core.count

    def snapshot(self) -> MetricSnapshot:
        now = self._clock()
        with self._lock:
            values = self._core.values(now)
            total = self._core.count
            items: list[ItemSnapshot] = []
            for key, core in self._items.items():
                item_values = core.values(now)
                item_values["percent"] = _percent(core.count, total)
                items.append(ItemSnapshot(labels=key, values=item_values))
        return MetricSnapshot(
            name=self.name,
            kind=self.kind,
            values=values,
            item_labels=self.item_labels,
            items=tuple(items),
        )


class _Reservoir:
    """Vitter's algorithm R: a uniform sample of a stream."""

    def __init__(self, size: int, rng: random.Random) -> None:
        self._size = size
        self._rng = rng
        self._seen = 0
        self._values: list[float] = []

    def update(self, value: float) -> None:
        self._seen += 1
        if len(self._values) < self._size:
            self._values.append(value)
            return
        index = self._rng.randrange(self._seen)
        if index < self._size:
            self._values[index] = value

    def values(self) -> list[float]:
        return sorted(self._values)


class Histogram:
    """Distribution statistics over a uniform sample of recorded values."""

    kind = MetricKind.HISTOGRAM

    def __init__(
        self,
        name: str,
        item_labels: Sequence[str] = (),
        reservoir_size: int = _DEFAULT_RESERVOIR_SIZE,
        rng: random.Random | None = None,
    ) -> None:
        self.name = name
        self.item_labels = tuple(item_labels)
        self._lock = threading.Lock()
        self._reservoir = _Reservoir(reservoir_size, rng or random.Random())
        self._count = 0
        self._last = 0.0

    def update(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._last = value
            self._reservoir.update(value)

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def values(self) -> dict[str, Number]:
        with self._lock:
            count = self._count
            last = self._last
            sample = self._reservoir.values()
        if sample:
            mean = sum(sample) / len(sample)
            variance = (
                sum((v - mean) ** 2 for v in sample) / (len(sample) - 1)
                if len(sample) > 1
                else 0.0
            )
            low, high = float(sample[0]), float(sample[-1])
        else:
            mean = variance = low = high = 0.0
        return {
            "count": count,
            "last": last,
            "min": low,
            "mean": mean,
            "max": high,
            "stddev": math.sqrt(variance),
            "median": _quantile(sample, 0.5),
            "p75": _quantile(sample, 0.75),
            "p95": _quantile(sample, 0.95),
            "p98": _quantile(sample, 0.98),
            "p99": _quantile(sample, 0.99),
            "p999": _quantile(sample, 0.999),
        }

    def snapshot(self) -> MetricSnapshot:
        return MetricSnapshot(
            name=self.name,
            kind=self.kind,
            values=self.values(),
            item_labels=self.item_labels,
        )


class Timer:
    """Times operations in milliseconds and meters how often they happen.

    Examples
    --------
    >>> t = Timer("api.use")
    >>> with t.time():
    ...     pass
    >>> t.count
    1
    """

    kind = MetricKind.TIMER

    def __init__(
        self,
        name: str,
        item_labels: Sequence[str] = (),
        clock: Clock = time.monotonic,
        rng: random.Random | None = None,
    ) -> None:
        self.name = name
        self.item_labels = tuple(item_labels)
        self._clock = clock
        self._lock = threading.Lock()
        self._histogram = Histogram(name, rng=rng)
        self._meter = Meter(name, clock=clock)
        self._active = 0
        self._total_ms = 0.0

    def record(self, duration_ms: float) -> None:
        """Record one completed call that took *duration_ms*."""
        self._histogram.update(duration_ms)
        self._meter.mark()
        with self._lock:
            self._total_ms += duration_ms

    @contextmanager
    def time(self) -> Iterator[None]:
        """Time the enclosed block, counting it as active while it runs."""
        with self._lock:
            self._active += 1
        start = self._clock()
        try:
            yield
        finally:
            elapsed_ms = (self._clock() - start) * 1000.0
            with self._lock:
                self._active -= 1
            self.record(elapsed_ms)

    @property
    def count(self) -> int:
        return self._histogram.count

    def snapshot(self) -> MetricSnapshot:
        values: dict[str, Number] = dict(self._histogram.values())
        values.pop("last", None)
        meter_values = self._meter.snapshot().values
        for key in ("rate_mean", "rate_1m", "rate_5m", "rate_15m"):
            values[key] = meter_values[key]
        with self._lock:
            values["active_sessions"] = self._active
            values["total_time"] = self._total_ms
        return MetricSnapshot(
            name=self.name,
            kind=self.kind,
            values=values,
            item_labels=self.item_labels,
        )
