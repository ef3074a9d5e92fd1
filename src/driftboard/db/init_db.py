from __future__ import annotations

from sqlalchemy.engine import Engine

from driftboard.db.schema import Base


def ensure_db(engine: Engine) -> None:
    """Create missing tables; existing board contents are left alone."""
    Base.metadata.create_all(bind=engine)


def init_db(engine: Engine) -> None:
    """
    Reset the board schema (drops every stored artifact).

    DuckDB + SQLAlchemy can behave oddly with transactional DDL when dropping/creating
    tables in a single managed transaction. The safest approach:
    - open a plain connection
    - drop_all
    - create_all
    - commit explicitly before closing
    """
    conn = engine.connect()
    try:
        Base.metadata.drop_all(bind=conn)
        Base.metadata.create_all(bind=conn)
        conn.commit()
    finally:
        conn.close()
