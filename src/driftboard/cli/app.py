from __future__ import annotations

from typing import Optional

import typer
import uvicorn
from rich.table import Table

from driftboard.cli.common import build_config, configure_logging, console, open_board
from driftboard.cli.history import plot_history_cmd, show_history_cmd
from driftboard.cli.monitor import monitor_cmd
from driftboard.cli.train_model import train_model_cmd
from driftboard.db.engine import build_engine
from driftboard.db.init_db import init_db

app = typer.Typer(help="driftboard CLI (board, model pinning, monitoring runs).")


@app.callback()
def _root(
    log_level: Optional[str] = typer.Option(None, help="Logging level (default from settings)"),
) -> None:
    configure_logging(log_level)


@app.command("init-db")
def init_db_cmd(
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """Create (or reset) the board schema."""
    config = build_config(board_url=board_url)
    credential = config.board_credential.get_secret_value() if config.board_credential else None
    init_db(build_engine(config.board_url, credential=credential))
    typer.echo("✅ Board initialized and reachable.")


@app.command("list-artifacts")
def list_artifacts_cmd(
    board_url: Optional[str] = typer.Option(None, help="Board SQLAlchemy URL"),
) -> None:
    """List board artifacts with their latest version."""
    board = open_board(build_config(board_url=board_url))

    table = Table(title="Board Artifacts")
    table.add_column("name", style="cyan")
    table.add_column("type", style="magenta")
    table.add_column("latest", justify="right")
    table.add_column("created_at", style="green")
    for name in board.list_names():
        row = board.read(name)
        table.add_row(name, row.artifact_type, str(row.version), row.created_at.isoformat())
    console.print(table)


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8080, help="Port"),
) -> None:
    """Run the prediction endpoint."""
    uvicorn.run("driftboard.api.main:app", host=host, port=port)


app.command("train-model")(train_model_cmd)
app.command("monitor")(monitor_cmd)
app.command("show-history")(show_history_cmd)
app.command("plot-history")(plot_history_cmd)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
