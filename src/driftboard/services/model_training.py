"""Minimal logistic regression fit used to produce a pinnable model."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np

from driftboard.errors import SchemaMismatch
from driftboard.models.domain import LabeledRecord
from driftboard.repos.board_repo import BoardRepository
from driftboard.services.aggregation import accuracy, f1
from driftboard.services.datasets import load_labeled_records
from driftboard.services.model_artifact import LogisticModel, _sigmoid, pin_model

logger = logging.getLogger(__name__)


class ModelTrainer:
    """Offline logistic regression trainer."""

    def __init__(self, lr: float = 0.1, epochs: int = 500, seed: int = 42):
        self.lr = lr
        self.epochs = epochs
        self.seed = seed

    def split_train_val(
        self,
        rows: List[LabeledRecord],
        split_ratio: float,
    ) -> Tuple[List[LabeledRecord], List[LabeledRecord]]:
        rng = np.random.default_rng(self.seed)
        indices = np.arange(len(rows))
        rng.shuffle(indices)
        n_train = max(1, int(len(rows) * split_ratio))
        n_train = min(n_train, len(rows) - 1) if len(rows) > 1 else len(rows)
        train = [rows[i] for i in indices[:n_train]]
        val = [rows[i] for i in indices[n_train:]]
        return train, val

    def train_logistic_regression(self, X: np.ndarray, y: np.ndarray) -> Tuple[np.ndarray, float]:
        n_samples, n_features = X.shape
        weights = np.zeros(n_features, dtype=float)
        intercept = 0.0

        for _ in range(self.epochs):
            probs = _sigmoid(X @ weights + intercept)
            error = probs - y
            weights -= self.lr * (X.T @ error) / n_samples
            intercept -= self.lr * float(np.sum(error) / n_samples)

        return weights, intercept

    def fit(
        self,
        records: Sequence[LabeledRecord],
        feature_names: Optional[Sequence[str]] = None,
        positive_label: Optional[str] = None,
    ) -> LogisticModel:
        if not records:
            raise ValueError("Cannot fit a model on an empty dataset")

        labels = sorted({r.truth for r in records})
        if len(labels) != 2:
            raise SchemaMismatch(f"Binary classifier needs exactly two labels, got {labels}")
        if positive_label is not None and positive_label not in labels:
            raise SchemaMismatch(f"Positive label {positive_label!r} not in {labels}")
        pos = positive_label or labels[1]
        neg = labels[0] if labels[1] == pos else labels[1]

        names = tuple(feature_names) if feature_names else tuple(sorted(records[0].features))
        if not names:
            raise SchemaMismatch("Dataset has no feature columns")

        skeleton = LogisticModel(
            feature_names=names,
            weights=tuple(0.0 for _ in names),
            intercept=0.0,
            classes=(neg, pos),
        )
        X = skeleton.matrix([r.features for r in records])
        y = np.asarray([1.0 if r.truth == pos else 0.0 for r in records])

        weights, intercept = self.train_logistic_regression(X, y)
        return LogisticModel(
            feature_names=names,
            weights=tuple(float(w) for w in weights),
            intercept=float(intercept),
            classes=(neg, pos),
        )

    def evaluate(self, model: LogisticModel, records: Sequence[LabeledRecord]) -> dict:
        if not records:
            return {"n": 0}
        preds = model.predict([r.features for r in records])
        pairs = [(r.truth, p) for r, p in zip(records, preds)]
        return {"n": len(pairs), "accuracy": accuracy(pairs), "f1": f1(pairs)}

    def train_and_pin(
        self,
        board: BoardRepository,
        dataset_path: str | Path,
        model_name: str,
        split_ratio: float = 0.8,
        positive_label: Optional[str] = None,
    ) -> Tuple[int, LogisticModel, dict]:
        """Fit on a labeled CSV and pin the model with its metrics as metadata."""
        rows = load_labeled_records(dataset_path)
        train_rows, val_rows = self.split_train_val(rows, split_ratio)

        model = self.fit(train_rows, positive_label=positive_label)
        metrics = self.evaluate(model, val_rows)

        dataset_hash = hashlib.sha256(Path(dataset_path).read_bytes()).hexdigest()
        version = pin_model(
            board,
            model_name,
            model,
            metadata={
                "dataset_name": Path(dataset_path).stem,
                "dataset_hash": dataset_hash,
                "metrics": metrics,
                "n_train": len(train_rows),
            },
        )
        logger.info("Pinned %s v%d (val accuracy=%s)", model_name, version, metrics.get("accuracy"))
        return version, model, metrics
