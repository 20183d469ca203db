"""Batch partitioning for signalfx-metrics."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TypeVar

from signalfx_metrics.schema.errors import ConfigurationError

T = TypeVar("T")


def iter_chunks(items: Iterable[T], max_size: int) -> Iterator[list[T]]:
    """Lazily yield consecutive chunks of at most *max_size* items.

    Order is preserved and every item lands in exactly one chunk.  Only the
    final chunk may be shorter than *max_size*.

    Raises
    ------
    ConfigurationError
        If *max_size* is less than 1.
    """
    if max_size < 1:
        raise ConfigurationError(
            f"max_size must be >= 1, got {max_size}",
            context={"max_size": max_size},
        )
    return _iter_chunks(items, max_size)


def _iter_chunks(items: Iterable[T], max_size: int) -> Iterator[list[T]]:
    current: list[T] = []
    for item in items:
        current.append(item)
        if len(current) == max_size:
            yield current
            current = []
    if current:
        yield current


def chunk(items: Iterable[T], max_size: int) -> list[list[T]]:
    """Partition *items* into a list of batches.

    Examples
    --------
    >>> [len(b) for b in chunk(range(5), 2)]
    [2, 2, 1]
    >>> chunk([], 3)
    []
    """
    return list(iter_chunks(items, max_size))
