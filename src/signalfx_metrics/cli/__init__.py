"""Command-line interface for signalfx-metrics."""
