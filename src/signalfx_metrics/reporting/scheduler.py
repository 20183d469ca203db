"""Fixed-interval scheduling for signalfx-metrics.

``ScheduledReporter`` runs ``report_once`` on a daemon thread.  Every cycle,
including the optional final one run by :meth:`ScheduledReporter.stop`,
holds the scheduler's cycle lock, so cycles never overlap even when a
thread that outlived ``stop(timeout)`` is still finishing.  A tick that
falls due while a cycle is still sending is absorbed.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Protocol

from signalfx_metrics.reporting.reporter import CycleResult
from signalfx_metrics.schema.errors import ConfigurationError

logger = logging.getLogger(__name__)


class CycleRunner(Protocol):
    def report_once(self) -> CycleResult:
        ...


class ScheduledReporter:
    """Calls ``runner.report_once()`` every *interval_seconds*.

    Parameters
    ----------
    runner:
        Usually a :class:`~signalfx_metrics.reporting.reporter.SignalFxReporter`.
    interval_seconds:
        Period between cycle starts.  Must be positive.
    report_on_stop:
        Run one final cycle when :meth:`stop` is called, so values
        accumulated since the last tick are not lost on shutdown.

    Examples
    --------
    ::

        with ScheduledReporter(reporter, interval_seconds=10):
            serve_forever()
    """

    def __init__(
        self,
        runner: CycleRunner,
        interval_seconds: float,
        report_on_stop: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ConfigurationError(
                f"interval_seconds must be > 0, got {interval_seconds}",
                context={"interval_seconds": interval_seconds},
            )
        self._runner = runner
        self._interval = interval_seconds
        self._report_on_stop = report_on_stop
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._cycle_lock = threading.Lock()
        self.last_result: CycleResult | None = None
        self.cycles_run = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread; a second call is a no-op.

        Each thread gets its own stop event, so a thread left over from a
        timed-out :meth:`stop` still exits after its current cycle.
        """
        with self._lock:
            if self.running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="signalfx-reporter",
                daemon=True,
            )
            self._thread.start()
        logger.info("Started SignalFx reporting every %ss", self._interval)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the thread to stop and wait up to *timeout* for it.

        When the thread is still inside a cycle after *timeout*, the final
        ``report_on_stop`` cycle is skipped rather than run alongside it.
        """
        with self._lock:
            thread = self._thread
            stop_event = self._stop_event
            self._thread = None
        if thread is None:
            return
        stop_event.set()
        thread.join(timeout)
        if thread.is_alive():
            logger.warning(
                "Reporting thread still busy after %ss; it will exit after its current cycle",
                timeout,
            )
        elif self._report_on_stop:
            self._run_cycle()
        logger.info("Stopped SignalFx reporting after %d cycles", self.cycles_run)

    def _run(self, stop_event: threading.Event) -> None:
        next_run = time.monotonic() + self._interval
        while not stop_event.wait(max(0.0, next_run - time.monotonic())):
            self._run_cycle()
            now = time.monotonic()
            next_run += self._interval
            if next_run <= now:
                skipped = int((now - next_run) // self._interval) + 1
                logger.debug("Cycle overran; skipping %d tick(s)", skipped)
                next_run += skipped * self._interval

    def _run_cycle(self) -> None:
        with self._cycle_lock:
            try:
                self.last_result = self._runner.report_once()
            except Exception:  # noqa: BLE001
                logger.exception("Reporting cycle failed")
            finally:
                self.cycles_run += 1

    def __enter__(self) -> "ScheduledReporter":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"ScheduledReporter(interval={self._interval}, running={self.running})"
