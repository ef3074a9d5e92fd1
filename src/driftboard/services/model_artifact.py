"""Pinned classification model: serialisation and board round-trip."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

import numpy as np

from driftboard.errors import ModelUnavailable, SchemaMismatch
from driftboard.repos.board_repo import BoardRepository


MODEL_ARTIFACT_TYPE = "model"


def _sigmoid(z: np.ndarray) -> np.ndarray:
    z = np.clip(z, -50, 50)
    return 1.0 / (1.0 + np.exp(-z))


@dataclass(frozen=True)
class LogisticModel:
    """
    Binary logistic regression over named numeric features.

    classes[1] is the positive class; score >= threshold predicts it.
    """

    feature_names: Tuple[str, ...]
    weights: Tuple[float, ...]
    intercept: float
    classes: Tuple[str, str]
    threshold: float = 0.5

    def missing_features(self, rows: Sequence[Mapping[str, float]]) -> List[str]:
        missing = set()
        for row in rows:
            missing.update(name for name in self.feature_names if name not in row)
        return sorted(missing)

    def matrix(self, rows: Sequence[Mapping[str, float]]) -> np.ndarray:
        missing = self.missing_features(rows)
        if missing:
            raise SchemaMismatch(f"Input records lack model features: {missing}")
        try:
            values = [[float(row[name]) for name in self.feature_names] for row in rows]
        except (TypeError, ValueError) as e:
            raise SchemaMismatch(f"Non-numeric feature value: {e}") from e
        return np.asarray(values, dtype=float).reshape(len(rows), len(self.feature_names))

    def predict_proba(self, rows: Sequence[Mapping[str, float]]) -> np.ndarray:
        X = self.matrix(rows)
        return _sigmoid(X @ np.asarray(self.weights, dtype=float) + self.intercept)

    def predict(self, rows: Sequence[Mapping[str, float]]) -> List[str]:
        probs = self.predict_proba(rows)
        neg, pos = self.classes
        return [pos if p >= self.threshold else neg for p in probs]

    def to_payload(self) -> dict:
        return {
            "feature_names": list(self.feature_names),
            "weights": [float(w) for w in self.weights],
            "intercept": float(self.intercept),
            "classes": list(self.classes),
            "threshold": float(self.threshold),
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "LogisticModel":
        return cls(
            feature_names=tuple(payload["feature_names"]),
            weights=tuple(float(w) for w in payload["weights"]),
            intercept=float(payload["intercept"]),
            classes=(str(payload["classes"][0]), str(payload["classes"][1])),
            threshold=float(payload.get("threshold", 0.5)),
        )


@dataclass(frozen=True)
class PinnedModel:
    name: str
    version: int
    model: LogisticModel
    metadata: dict


def pin_model(
    board: BoardRepository,
    name: str,
    model: LogisticModel,
    metadata: Optional[dict] = None,
) -> int:
    meta = {"feature_names": list(model.feature_names), "classes": list(model.classes)}
    meta.update(metadata or {})
    return board.write(name, MODEL_ARTIFACT_TYPE, model.to_payload(), metadata=meta)


def load_model(board: BoardRepository, name: str, version: Optional[int] = None) -> PinnedModel:
    row = board.read(name, version=version)
    if row is None:
        where = f"{name} v{version}" if version is not None else name
        raise ModelUnavailable(f"Model {where} not found on the board")
    if row.artifact_type != MODEL_ARTIFACT_TYPE:
        raise ModelUnavailable(f"Artifact {name} v{row.version} is a {row.artifact_type}, not a model")
    try:
        model = LogisticModel.from_payload(json.loads(row.payload_json))
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ModelUnavailable(f"Model {name} v{row.version} payload is unreadable: {e}") from e
    metadata = json.loads(row.metadata_json) if row.metadata_json else {}
    return PinnedModel(name=name, version=row.version, model=model, metadata=metadata)
