"""CLI command for one monitoring run."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from driftboard.cli.common import build_config, console, fail, open_board
from driftboard.errors import DriftboardError
from driftboard.services.datasets import load_labeled_records
from driftboard.services.monitoring import run_monitoring
from driftboard.services.scoring import BoardModelScorer, EndpointScorer


def monitor_cmd(
    dataset: Path = typer.Option(..., help="Labeled CSV (observed_at,label,<features>)"),
    use_endpoint: bool = typer.Option(
        False,
        "--use-endpoint",
        help="Score through the prediction endpoint instead of the pinned board model",
    ),
    endpoint_url: Optional[str] = typer.Option(None, help="Prediction endpoint base URL"),
    model_name: Optional[str] = typer.Option(None, help="Board model name"),
    model_version: Optional[int] = typer.Option(None, help="Pinned model version (default: latest)"),
    history_name: Optional[str] = typer.Option(None, help="Metric history name"),
    period: Optional[str] = typer.Option(None, help="hour/day/week/month"),
    metric: Optional[List[str]] = typer.Option(None, "--metric", help="Metric to compute (repeatable)"),
    allow_stale_model: Optional[bool] = typer.Option(None, help="Tolerate endpoint/board model divergence"),
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """Score a labeled batch, aggregate metrics per period and append them to the history."""
    config = build_config(
        endpoint_url=endpoint_url,
        model_name=model_name,
        model_version=model_version,
        history_name=history_name,
        period=period,
        metrics=tuple(metric) if metric else None,
        allow_stale_model=allow_stale_model,
        board_url=board_url,
    )
    board = open_board(config)

    if use_endpoint:
        scorer = EndpointScorer(config.endpoint_url, timeout_s=config.http_timeout_s)
    else:
        scorer = BoardModelScorer(board, config.model_name, model_version=config.model_version)

    try:
        records = load_labeled_records(dataset)
        result = run_monitoring(board, config, scorer, records)
    except DriftboardError as e:
        fail(f"{type(e).__name__}: {e}")

    if not result.rows:
        console.print(f"[yellow]![/yellow] No records in {dataset}; {config.history_name} unchanged")
        return

    table = Table(title=f"{config.history_name} v{result.history_version} (+{len(result.rows)} rows)")
    table.add_column("Bucket", style="cyan")
    table.add_column("Metric", style="magenta")
    table.add_column("Value", style="green", justify="right")
    table.add_column("Count", justify="right")
    for r in result.rows:
        table.add_row(r.bucket.isoformat(), r.metric, f"{r.value:.4f}", str(r.count))
    console.print(table)
    console.print(
        f"[green]✓[/green] Scored {result.n_records} records with "
        f"{result.served_model.model_name} v{result.served_model.model_version}"
    )


if __name__ == "__main__":
    typer.run(monitor_cmd)
