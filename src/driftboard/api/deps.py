"""API dependencies."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from sqlalchemy.engine import Engine

from driftboard.config.settings import settings
from driftboard.db.engine import build_engine
from driftboard.db.init_db import ensure_db
from driftboard.errors import ModelUnavailable
from driftboard.repos.board_repo import BoardRepository
from driftboard.services.model_artifact import PinnedModel, load_model


# one pooled engine per board for the life of the process
@lru_cache(maxsize=None)
def _engine_for(db_url: str, credential: Optional[str]) -> Engine:
    return build_engine(db_url, credential=credential)


@lru_cache(maxsize=None)
def _ready_engine_for(db_url: str, credential: Optional[str]) -> Engine:
    engine = _engine_for(db_url, credential)
    ensure_db(engine)
    return engine


def get_board_engine() -> Engine:
    return _engine_for(settings.board_url, settings.board_credential)


def get_board() -> BoardRepository:
    return BoardRepository(_ready_engine_for(settings.board_url, settings.board_credential))


def get_pinned_model(board: BoardRepository = Depends(get_board)) -> PinnedModel:
    try:
        return load_model(board, settings.model_name, version=settings.model_version)
    except ModelUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
