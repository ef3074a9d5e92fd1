"""Prediction endpoint routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from driftboard.api.deps import get_pinned_model
from driftboard.api.schemas import ModelMetadataResponse
from driftboard.errors import SchemaMismatch
from driftboard.services.model_artifact import PinnedModel

router = APIRouter(tags=["predict"])


@router.post("/predict", response_model=list[str])
def predict(
    payload: list[dict[str, float]],
    pinned: PinnedModel = Depends(get_pinned_model),
):
    if not payload:
        return []
    try:
        return pinned.model.predict(payload)
    except SchemaMismatch as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.get("/metadata", response_model=ModelMetadataResponse)
def metadata(pinned: PinnedModel = Depends(get_pinned_model)):
    return ModelMetadataResponse(
        model_name=pinned.name,
        model_version=pinned.version,
        feature_names=list(pinned.model.feature_names),
        classes=list(pinned.model.classes),
        metadata=pinned.metadata,
    )
