"""One reporting cycle for signalfx-metrics.

``SignalFxReporter.report_once`` runs the whole pipeline synchronously:

1. read one snapshot from the metric source and stamp one timestamp,
2. translate each metric into datapoints,
3. chunk the datapoints into batches,
4. send every batch in order, recording each outcome.

A metric that fails to translate is logged and skipped; a batch that fails
to send is recorded and the remaining batches are still attempted.

Shipped in this module
----------------------
- BatchOutcome      — size and error (if any) of one transmitted batch
- CycleResult       — ordered outcomes of one cycle
- BatchSender       — protocol the reporter sends through
- SignalFxReporter  — the cycle runner
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from signalfx_metrics.pipeline.batcher import iter_chunks
from signalfx_metrics.pipeline.dimensions import merge_dimensions
from signalfx_metrics.pipeline.translator import translate
from signalfx_metrics.registry.registry import MetricSource
from signalfx_metrics.schema.config import ReportingConfig
from signalfx_metrics.schema.errors import TransmitError
from signalfx_metrics.schema.snapshot import Datapoint

logger = logging.getLogger(__name__)


class BatchSender(Protocol):
    """Anything that can deliver one batch; see ``HttpTransmitter``."""

    def send(self, batch: Sequence[Datapoint]) -> int:
        ...


@dataclass(frozen=True)
class BatchOutcome:
    """Result of sending one batch.

    Attributes
    ----------
    size:
        Number of datapoints in the batch.
    error:
        ``None`` on success, otherwise the ``RejectedError`` or
        ``UnavailableError`` raised for this batch.
    """

    size: int
    error: TransmitError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CycleResult:
    """Ordered per-batch outcomes of one reporting cycle.

    Attributes
    ----------
    timestamp:
        Cycle timestamp in epoch milliseconds.
    outcomes:
        One :class:`BatchOutcome` per batch, in send order.
    skipped_metrics:
        Names of metrics whose translation failed this cycle.
    """

    timestamp: int
    outcomes: list[BatchOutcome] = field(default_factory=list)
    skipped_metrics: list[str] = field(default_factory=list)

    @property
    def sent_count(self) -> int:
        return sum(o.size for o in self.outcomes if o.ok)

    @property
    def failed_count(self) -> int:
        return sum(o.size for o in self.outcomes if not o.ok)

    @property
    def succeeded(self) -> bool:
        """True when no batch failed (an empty cycle counts as success)."""
        return all(o.ok for o in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "sent": self.sent_count,
            "failed": self.failed_count,
            "batches": [
                {
                    "size": o.size,
                    "error": None if o.error is None else type(o.error).__name__,
                }
                for o in self.outcomes
            ],
            "skipped_metrics": list(self.skipped_metrics),
        }


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class SignalFxReporter:
    """Runs the snapshot → datapoint → batch → HTTP pipeline.

    Parameters
    ----------
    config:
        Resolved, immutable reporting configuration.
    source:
        The metric source read once per cycle.
    sender:
        Delivers batches; normally an
        :class:`~signalfx_metrics.transport.transmitter.HttpTransmitter`.
    clock:
        Returns the cycle timestamp in epoch milliseconds.

    The reporter is not re-entrant; the scheduler guarantees cycles never
    overlap.
    """

    def __init__(
        self,
        config: ReportingConfig,
        source: MetricSource,
        sender: BatchSender,
        clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._config = config
        self._source = source
        self._sender = sender
        self._clock = clock
        self._base_dimensions = merge_dimensions(
            config.default_dimensions, config.default_source
        )

    @property
    def config(self) -> ReportingConfig:
        return self._config

    def collect(self) -> tuple[int, list[Datapoint], list[str]]:
        """Snapshot the source and translate it into datapoints.

        Returns
        -------
        tuple[int, list[Datapoint], list[str]]
            Cycle timestamp, datapoints in metric order, and the names of
            metrics whose translation raised.
        """
        snapshots = self._source.snapshot()
        timestamp = self._clock()
        datapoints: list[Datapoint] = []
        skipped: list[str] = []
        for snapshot in snapshots:
            try:
                datapoints.extend(
                    translate(
                        snapshot,
                        self._base_dimensions,
                        self._config.default_source,
                        timestamp,
                        self._config.detail_set,
                    )
                )
            except Exception:  # noqa: BLE001
                logger.exception("Skipping metric %s: translation failed", snapshot.name)
                skipped.append(snapshot.name)
        return timestamp, datapoints, skipped

    def report_once(self) -> CycleResult:
        """Run one full reporting cycle and return its outcomes."""
        timestamp, datapoints, skipped = self.collect()
        result = CycleResult(timestamp=timestamp, skipped_metrics=skipped)

        for batch in iter_chunks(datapoints, self._config.max_datapoints_per_message):
            try:
                self._sender.send(batch)
            except TransmitError as exc:
                logger.warning(
                    "Batch of %d datapoints failed (%s): %s",
                    len(batch),
                    type(exc).__name__,
                    exc,
                )
                result.outcomes.append(BatchOutcome(size=len(batch), error=exc))
            else:
                result.outcomes.append(BatchOutcome(size=len(batch)))

        if result.outcomes:
            logger.info(
                "Reported %d datapoints in %d batches (%d failed)",
                result.sent_count,
                len(result.outcomes),
                result.failed_count,
            )
        else:
            logger.debug("No datapoints to report this cycle")
        return result

    def __repr__(self) -> str:
        return f"SignalFxReporter(source={self._config.default_source!r})"
