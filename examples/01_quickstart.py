#!/usr/bin/env python3
"""Example: Quickstart

Registers a few metrics, then prints the datapoints one reporting cycle
would send, without contacting SignalFx.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install signalfx-metrics
"""
from __future__ import annotations

import json

import signalfx_metrics
from signalfx_metrics import MetricsRegistry, ReporterBuilder
from signalfx_metrics.transport.serializer import to_payload


def main() -> None:
    print(f"signalfx-metrics version: {signalfx_metrics.__version__}")

    # Step 1: Register metrics
    registry = MetricsRegistry()
    calls = registry.counter("api.calls")
    latency = registry.timer("api.use", item_labels=["service=checkout"])
    registry.gauge("queue.depth", lambda: 7)

    # Step 2: Record some activity
    for api_type in ("login", "search", "login"):
        calls.increment(item=f"api_type={api_type}")
        with latency.time():
            sum(range(10_000))

    # Step 3: Build a reporter
    reporter = (
        ReporterBuilder("example-token", interval_seconds=10)
        .with_default_dimensions({"environment": "dev"})
        .with_detail_set(["count", "mean", "max", "p99", "percent"])
        .with_source("example-host")
        .build(registry)
    )

    # Step 4: Show one cycle's payload
    timestamp, datapoints, _ = reporter.collect()
    print(f"\n{len(datapoints)} datapoints at {timestamp}:")
    print(json.dumps(to_payload(datapoints), indent=2))


if __name__ == "__main__":
    main()
