from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping


@dataclass(frozen=True)
class LabeledRecord:
    observed_at: datetime
    truth: str
    features: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ScoredRecord:
    observed_at: datetime
    truth: str
    prediction: str
    score: float | None = None


@dataclass(frozen=True)
class MetricRow:
    bucket: datetime
    metric: str
    value: float
    count: int


@dataclass(frozen=True)
class ArtifactVersionRow:
    name: str
    version: int
    created_at: datetime
    artifact_type: str
    payload_json: str
    metadata_json: str | None
