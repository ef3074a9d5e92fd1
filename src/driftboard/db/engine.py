# src/driftboard/db/engine.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url

from driftboard.config.settings import settings

# file-backed dialects have no password slot
LOCAL_DIALECTS = ("duckdb", "sqlite")


@dataclass(frozen=True)
class BoardPing:
    ok: bool
    detail: str


def is_motherduck(url: URL) -> bool:
    return url.get_backend_name() == "duckdb" and (url.database or "").startswith("md:")


def credential_accepted(db_url: str) -> bool:
    """True when a board at `db_url` can use a shared-access credential."""
    url = make_url(db_url)
    return url.get_backend_name() not in LOCAL_DIALECTS or is_motherduck(url)


def apply_credential(url: URL, credential: Optional[str]) -> Tuple[URL, Dict[str, Any]]:
    """
    Place the credential where the dialect expects it.

    Server boards take it as the URL password. MotherDuck boards take it as
    the `motherduck_token` connection config. Local DuckDB/SQLite files have
    nowhere to put it, so a credential there is a configuration error.
    Returns the URL plus the `connect_args` for create_engine.
    """
    if not credential:
        return url, {}
    if is_motherduck(url):
        return url, {"config": {"motherduck_token": credential}}
    if url.get_backend_name() in LOCAL_DIALECTS:
        raise ValueError(
            f"Board URL {url.render_as_string(hide_password=True)!r} is a local "
            "file and does not take a credential"
        )
    return url.set(password=credential), {}


def build_engine(db_url: Optional[str] = None, credential: Optional[str] = None) -> Engine:
    """
    Build a SQLAlchemy Engine for the board.

    Why allow overrides?
    - tests need in-memory or temp DBs
    - CLI/API should default to settings.board_url
    """
    url = make_url(db_url or settings.board_url)
    url, connect_args = apply_credential(url, credential or settings.board_credential)
    if url.drivername == "duckdb" and url.database and url.database != ":memory:" and not is_motherduck(url):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    if url.drivername.startswith("postgresql"):
        return create_engine(url, future=True, pool_pre_ping=True)
    return create_engine(url, future=True, connect_args=connect_args)


def ping_board(engine: Engine) -> BoardPing:
    """
    Check that the board backing the artifact history answers a query.

    Connection failures are reported in `detail` instead of raised, so the
    container stays up and reports itself degraded.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("select 1")).scalar_one()
        return BoardPing(ok=True, detail="ok")
    except Exception as e:
        return BoardPing(ok=False, detail=f"{type(e).__name__}: {e}")
