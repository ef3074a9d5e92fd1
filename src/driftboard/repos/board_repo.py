"""Versioned artifact board backed by a SQL database."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.engine import Connection, Engine, Row
from sqlalchemy.exc import IntegrityError

from driftboard.db.schema import ArtifactVersion
from driftboard.errors import StoreWriteConflict
from driftboard.models.domain import ArtifactVersionRow


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_row(row: Row) -> ArtifactVersionRow:
    return ArtifactVersionRow(
        name=row.name,
        version=int(row.version),
        created_at=row.created_at,
        artifact_type=row.artifact_type,
        payload_json=row.payload_json,
        metadata_json=row.metadata_json,
    )


_COLUMNS = (
    ArtifactVersion.name,
    ArtifactVersion.version,
    ArtifactVersion.created_at,
    ArtifactVersion.artifact_type,
    ArtifactVersion.payload_json,
    ArtifactVersion.metadata_json,
)


class BoardRepository:
    """
    Named, versioned artifacts.

    Every write inserts version max+1 for the name inside one transaction, so a
    failed write leaves earlier versions untouched. Two writers racing for the
    same version number surface as StoreWriteConflict (last writer wins
    otherwise; there is no merge).
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def _next_version(self, conn: Connection, name: str) -> int:
        current = conn.execute(
            select(func.coalesce(func.max(ArtifactVersion.version), 0)).where(ArtifactVersion.name == name)
        ).scalar_one()
        return int(current) + 1

    def write(
        self,
        name: str,
        artifact_type: str,
        payload: Any,
        metadata: Optional[dict] = None,
    ) -> int:
        payload_json = json.dumps(payload, sort_keys=True)
        metadata_json = json.dumps(metadata, sort_keys=True) if metadata is not None else None

        try:
            with self._engine.begin() as conn:
                version = self._next_version(conn, name)
                conn.execute(
                    insert(ArtifactVersion).values(
                        name=name,
                        version=version,
                        created_at=utcnow(),
                        artifact_type=artifact_type,
                        payload_json=payload_json,
                        metadata_json=metadata_json,
                    )
                )
        except IntegrityError as e:
            raise StoreWriteConflict(f"Version conflict writing {name!r}: {e.orig}") from e
        return version

    def read(self, name: str, version: Optional[int] = None) -> Optional[ArtifactVersionRow]:
        """Latest version of `name` (or the given one); None when absent."""
        stmt = select(*_COLUMNS).where(ArtifactVersion.name == name)
        if version is None:
            stmt = stmt.order_by(ArtifactVersion.version.desc()).limit(1)
        else:
            stmt = stmt.where(ArtifactVersion.version == version)

        with self._engine.connect() as conn:
            row = conn.execute(stmt).fetchone()

        if row is None:
            return None
        return _to_row(row)

    def latest_version(self, name: str) -> Optional[int]:
        with self._engine.connect() as conn:
            value = conn.execute(
                select(func.max(ArtifactVersion.version)).where(ArtifactVersion.name == name)
            ).scalar_one()
        return int(value) if value is not None else None

    def versions(self, name: str) -> list[ArtifactVersionRow]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(*_COLUMNS)
                .where(ArtifactVersion.name == name)
                .order_by(ArtifactVersion.version)
            ).fetchall()
        return [_to_row(r) for r in rows]

    def list_names(self, artifact_type: Optional[str] = None) -> list[str]:
        stmt = select(ArtifactVersion.name).distinct().order_by(ArtifactVersion.name)
        if artifact_type is not None:
            stmt = stmt.where(ArtifactVersion.artifact_type == artifact_type)
        with self._engine.connect() as conn:
            return [r[0] for r in conn.execute(stmt).fetchall()]
