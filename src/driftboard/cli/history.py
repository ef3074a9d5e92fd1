"""CLI commands for reading metric histories back."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from driftboard.cli.common import build_config, console, fail, open_board
from driftboard.services.plotting import plot_metric_history
from driftboard.services.recorder import MetricRecorder


def show_history_cmd(
    history_name: Optional[str] = typer.Option(None, help="Metric history name"),
    version: Optional[int] = typer.Option(None, help="History version (default: latest)"),
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """Print the accumulated metric history."""
    config = build_config(history_name=history_name, board_url=board_url)
    recorder = MetricRecorder(open_board(config))
    try:
        rows = recorder.read(config.history_name, version=version)
    except ValueError as e:
        fail(str(e))

    if not rows:
        console.print(f"[yellow]![/yellow] {config.history_name} has no recorded metrics")
        return

    table = Table(title=f"Metric history: {config.history_name}")
    table.add_column("Bucket", style="cyan")
    table.add_column("Metric", style="magenta")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Count", justify="right")
    for r in rows:
        table.add_row(r.bucket.isoformat(), r.metric, f"{r.value:.4f}", str(r.count))
    console.print(table)


def plot_history_cmd(
    out: Path = typer.Option(Path("reports/metrics.png"), help="Output PNG path"),
    history_name: Optional[str] = typer.Option(None, help="Metric history name"),
    metric: Optional[List[str]] = typer.Option(None, "--metric", help="Only plot these metrics"),
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """Plot the metric history to a PNG file."""
    config = build_config(history_name=history_name, board_url=board_url)
    recorder = MetricRecorder(open_board(config))
    try:
        rows = recorder.read(config.history_name)
        path = plot_metric_history(rows, out, metrics=metric, title=config.history_name)
    except ValueError as e:
        fail(str(e))
    console.print(f"[green]✓[/green] Wrote plot to {path}")
