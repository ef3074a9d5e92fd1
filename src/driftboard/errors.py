"""Failures that abort a monitoring run."""

from __future__ import annotations


class DriftboardError(Exception):
    """Base class for pipeline failures surfaced to the caller."""


class ModelUnavailable(DriftboardError):
    """The model artifact or the prediction endpoint cannot be resolved."""


class StaleModel(ModelUnavailable):
    """The endpoint serves a different model version than the board holds."""

    def __init__(self, model_name: str, board_version: int | None, served_version: int | None):
        self.model_name = model_name
        self.board_version = board_version
        self.served_version = served_version
        super().__init__(
            f"Endpoint serves {model_name} v{served_version} but the board's latest is v{board_version}"
        )


class SchemaMismatch(DriftboardError):
    """Input records do not carry the feature columns the model expects."""


class EmptyBucket(DriftboardError):
    """A metric was requested over a bucket with no records."""


class StoreWriteConflict(DriftboardError):
    """The board rejected a write because the version already exists."""
