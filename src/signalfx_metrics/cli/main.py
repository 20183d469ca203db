"""CLI entry point for signalfx-metrics.

Invoked as::

    signalfx-metrics [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m signalfx_metrics.cli.main
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from signalfx_metrics.schema.config import ReporterSettings, ReportingConfig

console = Console()
error_console = Console(stderr=True, style="bold red")


def _load_settings(config: str | None) -> ReporterSettings:
    from signalfx_metrics.config.loader import ConfigLoader

    loader = ConfigLoader()
    try:
        if config:
            if Path(config).suffix == ".json":
                return loader.load_json(config)
            return loader.load_yaml(config)
        return loader.load_auto()
    except Exception as exc:  # noqa: BLE001
        error_console.print(f"Could not load config: {exc}")
        raise SystemExit(1) from exc


def _resolve(settings: ReporterSettings) -> ReportingConfig:
    from signalfx_metrics.sources.resolver import resolve_config

    try:
        return resolve_config(settings)
    except Exception as exc:  # noqa: BLE001
        error_console.print(f"Could not resolve configuration: {exc}")
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option()
def cli() -> None:
    """Report an in-process metrics registry to SignalFx"""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from signalfx_metrics import __version__

    console.print(f"[bold]signalfx-metrics[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command(name="init")
@click.option(
    "--directory",
    "-d",
    default=".",
    show_default=True,
    help="Directory in which to create the config file.",
)
def init_command(directory: str) -> None:
    """Write a starter signalfx.yaml in DIRECTORY."""
    from signalfx_metrics.config.defaults import DEFAULT_SETTINGS_YAML

    target_dir = Path(directory).resolve()
    config_path = target_dir / "signalfx.yaml"

    if config_path.exists():
        console.print(
            f"[yellow]Config already exists at {config_path}. Skipping.[/yellow]"
        )
        return

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_SETTINGS_YAML, encoding="utf-8")
        console.print(f"[green]Created signalfx config at {config_path}[/green]")
    except OSError as exc:
        error_console.print(f"Failed to create config: {exc}")
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


@cli.command(name="config")
@click.option("--show", is_flag=True, help="Show the loaded settings.")
@click.option("--validate", is_flag=True, help="Validate the settings and report the result.")
@click.option("--config", "-c", default=None, help="Path to a signalfx YAML or JSON file.")
def config_command(show: bool, validate: bool, config: str | None) -> None:
    """Load, validate, and display reporter settings."""
    settings = _load_settings(config)

    if validate and not show:
        console.print("[green]Configuration is valid.[/green]")
        return

    data = settings.model_dump(mode="json")
    data["api_token"] = "***"
    console.print_json(json.dumps(data))


# ---------------------------------------------------------------------------
# source
# ---------------------------------------------------------------------------


@cli.command(name="source")
@click.option("--config", "-c", default=None, help="Path to a signalfx YAML or JSON file.")
def source_command(config: str | None) -> None:
    """Resolve the source and dimensions this host would report with."""
    settings = _load_settings(config)
    resolved = _resolve(settings)

    table = Table(title="resolved dimensions", show_header=True, header_style="bold cyan")
    table.add_column("Dimension", style="dim")
    table.add_column("Value")
    table.add_row("source", resolved.default_source)
    for key, value in sorted(resolved.default_dimensions.items()):
        table.add_row(key, value)
    console.print(f"source_type: [bold]{settings.source_type.value}[/bold]")
    console.print(table)


# ---------------------------------------------------------------------------
# push
# ---------------------------------------------------------------------------


@cli.command(name="push")
@click.option("--config", "-c", default=None, help="Path to a signalfx YAML or JSON file.")
@click.option(
    "--metric",
    default="signalfx_metrics.heartbeat",
    show_default=True,
    help="Name of the gauge to send.",
)
@click.option("--value", default=1.0, show_default=True, type=float, help="Gauge value.")
@click.option("--dry-run", is_flag=True, help="Print the request body instead of sending it.")
def push_command(config: str | None, metric: str, value: float, dry_run: bool) -> None:
    """Send one reporting cycle containing a single gauge."""
    from signalfx_metrics.registry.registry import MetricsRegistry
    from signalfx_metrics.reporting.reporter import SignalFxReporter
    from signalfx_metrics.transport.serializer import to_payload
    from signalfx_metrics.transport.transmitter import HttpTransmitter

    settings = _load_settings(config)
    resolved = _resolve(settings)

    registry = MetricsRegistry()
    registry.gauge(metric, lambda: value)

    with HttpTransmitter(resolved) as transmitter:
        reporter = SignalFxReporter(resolved, registry, transmitter)
        if dry_run:
            _, datapoints, _ = reporter.collect()
            console.print(f"[dim]POST {transmitter.url}[/dim]")
            console.print_json(json.dumps(to_payload(datapoints)))
            return
        result = reporter.report_once()

    if result.succeeded:
        console.print(f"[green]Sent {result.sent_count} datapoint(s) to {resolved.base_uri}[/green]")
        return
    for outcome in result.outcomes:
        if outcome.error is not None:
            error_console.print(f"{type(outcome.error).__name__}: {outcome.error}")
    raise SystemExit(1)


if __name__ == "__main__":
    cli()
