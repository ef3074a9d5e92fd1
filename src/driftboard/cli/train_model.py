"""CLI command for fitting and pinning a model."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from driftboard.cli.common import build_config, console, fail, open_board
from driftboard.errors import DriftboardError
from driftboard.services.model_training import ModelTrainer


def train_model_cmd(
    dataset: Path = typer.Option(..., help="Labeled CSV (observed_at,label,<features>)"),
    model_name: Optional[str] = typer.Option(None, help="Board name for the model"),
    split_ratio: float = typer.Option(0.8, help="Train/val split ratio"),
    positive_label: Optional[str] = typer.Option(None, help="Label treated as the positive class"),
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """Fit a logistic regression model and pin it to the board."""
    config = build_config(model_name=model_name, board_url=board_url)
    board = open_board(config)

    try:
        version, model, metrics = ModelTrainer().train_and_pin(
            board,
            dataset_path=dataset,
            model_name=config.model_name,
            split_ratio=split_ratio,
            positive_label=positive_label,
        )
    except (DriftboardError, ValueError) as e:
        fail(str(e))

    table = Table(title=f"Pinned Model: {config.model_name} v{version}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("features", ", ".join(model.feature_names))
    table.add_row("classes", " / ".join(model.classes))
    for key in ("n", "accuracy", "f1"):
        if key in metrics:
            table.add_row(f"val_{key}", f"{metrics[key]}")
    console.print(table)


if __name__ == "__main__":
    typer.run(train_model_cmd)
