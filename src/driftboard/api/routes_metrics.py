"""Metric history read-back routes."""

from __future__ import annotations

import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from driftboard.api.deps import get_board
from driftboard.api.schemas import ArtifactVersionOut, MetricHistoryResponse, MetricRowOut
from driftboard.repos.board_repo import BoardRepository
from driftboard.services.recorder import MetricRecorder

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/{history_name}", response_model=MetricHistoryResponse)
def read_history(
    history_name: str,
    version: Optional[int] = Query(None, ge=1),
    board: BoardRepository = Depends(get_board),
):
    recorder = MetricRecorder(board)
    try:
        rows = recorder.read(history_name, version=version)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return MetricHistoryResponse(
        history_name=history_name,
        version=version or board.latest_version(history_name),
        rows=[MetricRowOut(bucket=r.bucket, metric=r.metric, value=r.value, count=r.count) for r in rows],
    )


@router.get("/{history_name}/versions", response_model=list[ArtifactVersionOut])
def list_versions(history_name: str, board: BoardRepository = Depends(get_board)):
    return [
        ArtifactVersionOut(
            version=v.version,
            created_at=v.created_at,
            artifact_type=v.artifact_type,
            metadata=json.loads(v.metadata_json) if v.metadata_json else None,
        )
        for v in MetricRecorder(board).versions(history_name)
    ]
