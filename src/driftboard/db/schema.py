# src/driftboard/db/schema.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ArtifactVersion(Base):
    """
    Board storage: one row per (artifact name, version).

    Rows are never updated; a write always inserts the next version.
    """
    __tablename__ = "artifact_versions"

    name: Mapped[str] = mapped_column(String, primary_key=True)
    # NOTE: version is assigned manually in BoardRepository to keep DuckDB compatible.
    version: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    artifact_type: Mapped[str] = mapped_column(String, nullable=False)  # model/metric_history
    payload_json: Mapped[str] = mapped_column(Text, nullable=False)
    metadata_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
