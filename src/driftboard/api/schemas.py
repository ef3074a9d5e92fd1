"""API schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ModelMetadataResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    model_version: int
    feature_names: list[str]
    classes: list[str]
    metadata: dict[str, Any]


class MetricRowOut(BaseModel):
    bucket: datetime
    metric: str
    value: float
    count: int


class MetricHistoryResponse(BaseModel):
    history_name: str
    version: Optional[int]
    rows: list[MetricRowOut]


class ArtifactVersionOut(BaseModel):
    version: int
    created_at: datetime
    artifact_type: str
    metadata: Optional[dict[str, Any]]
