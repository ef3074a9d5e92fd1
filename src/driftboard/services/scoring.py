"""Scorers: turn labeled records into scored records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol, Sequence

import httpx

from driftboard.errors import ModelUnavailable, SchemaMismatch
from driftboard.models.domain import LabeledRecord, ScoredRecord
from driftboard.repos.board_repo import BoardRepository
from driftboard.services.model_artifact import PinnedModel, load_model


PREDICT_PATH = "/predict"
METADATA_PATH = "/metadata"


@dataclass(frozen=True)
class ServedModelInfo:
    """What a scorer actually evaluates against."""

    model_name: str
    model_version: Optional[int]


class Scorer(Protocol):
    """One ScoredRecord per input record, in input order."""

    def score(self, records: Sequence[LabeledRecord]) -> List[ScoredRecord]:
        raise NotImplementedError

    def served_model(self) -> ServedModelInfo:
        raise NotImplementedError


class BoardModelScorer:
    """Scores locally with a model resolved from the board."""

    def __init__(self, board: BoardRepository, model_name: str, model_version: Optional[int] = None):
        self.board = board
        self.model_name = model_name
        self.model_version = model_version
        self._pinned: Optional[PinnedModel] = None

    def resolve(self) -> PinnedModel:
        if self._pinned is None:
            self._pinned = load_model(self.board, self.model_name, version=self.model_version)
        return self._pinned

    def served_model(self) -> ServedModelInfo:
        pinned = self.resolve()
        return ServedModelInfo(model_name=pinned.name, model_version=pinned.version)

    def score(self, records: Sequence[LabeledRecord]) -> List[ScoredRecord]:
        model = self.resolve().model
        if not records:
            return []
        rows = [r.features for r in records]
        probs = model.predict_proba(rows)
        preds = model.predict(rows)
        return [
            ScoredRecord(observed_at=r.observed_at, truth=r.truth, prediction=pred, score=float(prob))
            for r, pred, prob in zip(records, preds, probs)
        ]


class EndpointScorer:
    """
    Scores through the HTTP prediction endpoint.

    Dependency injection via `client` makes it testable without real HTTP.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout_s: float = 20.0,
        client: httpx.Client | None = None,
    ):
        self.endpoint_url = endpoint_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        close_client = False
        client = self._client
        if client is None:
            client = httpx.Client(timeout=self.timeout_s)
            close_client = True

        url = f"{self.endpoint_url}{path}"
        try:
            r = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise ModelUnavailable(f"Prediction endpoint unreachable at {url}: {e}") from e
        finally:
            if close_client:
                client.close()

        if r.status_code == 422:
            raise SchemaMismatch(f"Endpoint rejected the input schema: {r.text}")
        if r.status_code >= 400:
            raise ModelUnavailable(f"{method} {url} returned HTTP {r.status_code}: {r.text}")
        return r

    def _json(self, method: str, path: str, **kwargs) -> Any:
        r = self._request(method, path, **kwargs)
        try:
            return r.json()
        except ValueError as e:
            raise ModelUnavailable(
                f"{method} {self.endpoint_url}{path} returned a non-JSON body: {r.text[:200]!r}"
            ) from e

    def served_model(self) -> ServedModelInfo:
        payload = self._json("GET", METADATA_PATH)
        if not isinstance(payload, dict):
            raise ModelUnavailable(f"Endpoint metadata is not an object: {payload!r}")
        version = payload.get("model_version")
        try:
            model_version = int(version) if version is not None else None
        except (TypeError, ValueError) as e:
            raise ModelUnavailable(f"Endpoint reported an invalid model_version: {version!r}") from e
        return ServedModelInfo(
            model_name=str(payload.get("model_name", "")),
            model_version=model_version,
        )

    def score(self, records: Sequence[LabeledRecord]) -> List[ScoredRecord]:
        if not records:
            return []
        body = [dict(r.features) for r in records]
        predictions = self._json("POST", PREDICT_PATH, json=body)

        if not isinstance(predictions, list) or len(predictions) != len(records):
            got = len(predictions) if isinstance(predictions, list) else type(predictions).__name__
            raise SchemaMismatch(f"Endpoint returned {got} predictions for {len(records)} records")

        return [
            ScoredRecord(observed_at=r.observed_at, truth=r.truth, prediction=str(pred))
            for r, pred in zip(records, predictions)
        ]
