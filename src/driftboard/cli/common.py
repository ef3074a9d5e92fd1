"""Shared CLI plumbing."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from driftboard.config.monitor_config import MonitorConfig
from driftboard.config.settings import settings
from driftboard.db.engine import build_engine
from driftboard.db.init_db import ensure_db
from driftboard.repos.board_repo import BoardRepository

console = Console()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def open_board(config: MonitorConfig) -> BoardRepository:
    credential = config.board_credential.get_secret_value() if config.board_credential else None
    engine = build_engine(config.board_url, credential=credential)
    ensure_db(engine)
    return BoardRepository(engine)


def fail(message: str) -> None:
    console.print(f"[red]✗[/red] Error: {escape(message)}")
    raise typer.Exit(1)


def build_config(**overrides) -> MonitorConfig:
    try:
        return MonitorConfig.from_settings(settings, **overrides)
    except ValidationError as e:
        fail(f"invalid configuration: {e}")
