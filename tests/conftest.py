"""Shared fixtures for the signalfx-metrics test suite."""
from __future__ import annotations

import os
from collections.abc import Sequence

import pytest

from signalfx_metrics.schema.config import ReportingConfig
from signalfx_metrics.schema.errors import TransmitError
from signalfx_metrics.schema.snapshot import Datapoint, MetricSnapshot


@pytest.fixture(autouse=True)
def _clean_signalfx_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SIGNALFX_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("SIGNALFX_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def config() -> ReportingConfig:
    return ReportingConfig(
        api_token="test-token",
        base_uri="https://ingest.test",
        default_source="host1",
        default_dimensions={"environment": "prod"},
    )


class StaticSource:
    """MetricSource returning a fixed list of snapshots."""

    def __init__(self, snapshots: Sequence[MetricSnapshot]) -> None:
        self.snapshots = list(snapshots)
        self.calls = 0

    def snapshot(self) -> list[MetricSnapshot]:
        self.calls += 1
        return list(self.snapshots)


class RecordingSender:
    """BatchSender that records batches and fails on chosen call numbers."""

    def __init__(self, failures: dict[int, TransmitError] | None = None) -> None:
        self.batches: list[list[Datapoint]] = []
        self._failures = failures or {}

    def send(self, batch: Sequence[Datapoint]) -> int:
        index = len(self.batches)
        self.batches.append(list(batch))
        if index in self._failures:
            raise self._failures[index]
        return len(batch)


@pytest.fixture()
def make_source() -> type[StaticSource]:
    return StaticSource


@pytest.fixture()
def make_sender() -> type[RecordingSender]:
    return RecordingSender
