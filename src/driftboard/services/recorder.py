"""Append-only metric history on the board."""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

from driftboard.models.domain import ArtifactVersionRow, MetricRow
from driftboard.repos.board_repo import BoardRepository
from driftboard.services.datasets import parse_timestamp


METRIC_HISTORY_ARTIFACT_TYPE = "metric_history"


def row_to_dict(row: MetricRow) -> dict:
    return {
        "bucket": row.bucket.isoformat(),
        "metric": row.metric,
        "value": float(row.value),
        "count": int(row.count),
    }


def row_from_dict(item: dict) -> MetricRow:
    return MetricRow(
        bucket=parse_timestamp(item["bucket"]),
        metric=str(item["metric"]),
        value=float(item["value"]),
        count=int(item["count"]),
    )


class MetricRecorder:
    """
    Persists MetricRows under a history name.

    Each append writes the whole combined sequence as a new board version;
    prior versions are never touched. Appends are not deduplicated: recording
    the same rows twice stores them twice.
    """

    def __init__(self, board: BoardRepository):
        self.board = board

    def _stored_rows(self, history_name: str, version: Optional[int] = None) -> List[dict]:
        row = self.board.read(history_name, version=version)
        if row is None:
            return []
        if row.artifact_type != METRIC_HISTORY_ARTIFACT_TYPE:
            raise ValueError(f"Artifact {history_name!r} is a {row.artifact_type}, not a metric history")
        return list(json.loads(row.payload_json))

    def append(
        self,
        history_name: str,
        rows: Iterable[MetricRow],
        metadata: Optional[dict] = None,
    ) -> int:
        """Return the new version identifier."""
        combined = self._stored_rows(history_name) + [row_to_dict(r) for r in rows]
        return self.board.write(
            history_name,
            METRIC_HISTORY_ARTIFACT_TYPE,
            combined,
            metadata=metadata,
        )

    def read(self, history_name: str, version: Optional[int] = None) -> List[MetricRow]:
        """
        Full history in chronological order. Sorting is stable, so rows that
        share a bucket keep their append order. Unknown names read as empty.
        """
        rows = [row_from_dict(item) for item in self._stored_rows(history_name, version)]
        return sorted(rows, key=lambda r: r.bucket)

    def versions(self, history_name: str) -> List[ArtifactVersionRow]:
        return self.board.versions(history_name)
