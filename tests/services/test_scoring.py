"""Unit tests for board and endpoint scorers."""

import json
from datetime import datetime

import httpx
import pytest

from driftboard.errors import ModelUnavailable, SchemaMismatch
from driftboard.models.domain import LabeledRecord
from driftboard.services.model_artifact import LogisticModel, pin_model
from driftboard.services.scoring import BoardModelScorer, EndpointScorer


def test_board_scorer_one_record_per_input(board, sign_model, make_record):
    pin_model(board, "clf", sign_model)
    records = [
        make_record("2024-03-05T08:00:00", "yes", 1.0),
        make_record("2024-03-05T09:00:00", "no", -2.0),
        make_record("2024-03-06T10:00:00", "no", 0.5),
    ]

    scored = BoardModelScorer(board, "clf").score(records)

    assert len(scored) == len(records)
    assert [s.observed_at for s in scored] == [r.observed_at for r in records]
    assert [s.truth for s in scored] == ["yes", "no", "no"]
    assert [s.prediction for s in scored] == ["yes", "no", "yes"]
    assert all(0.0 <= s.score <= 1.0 for s in scored)


def test_board_scorer_uses_pinned_version(board, sign_model, make_record):
    pin_model(board, "clf", sign_model)
    flipped = LogisticModel(feature_names=("x",), weights=(-4.0,), intercept=0.0, classes=("no", "yes"))
    pin_model(board, "clf", flipped)

    record = [make_record("2024-03-05T08:00:00", "yes", 1.0)]
    assert BoardModelScorer(board, "clf").score(record)[0].prediction == "no"
    assert BoardModelScorer(board, "clf", model_version=1).score(record)[0].prediction == "yes"
    assert BoardModelScorer(board, "clf", model_version=1).served_model().model_version == 1


def test_board_scorer_missing_model(board, make_record):
    with pytest.raises(ModelUnavailable):
        BoardModelScorer(board, "absent").score([make_record("2024-03-05T08:00:00", "yes", 1.0)])


def test_board_scorer_schema_mismatch(board, sign_model):
    pin_model(board, "clf", sign_model)
    records = [LabeledRecord(observed_at=datetime(2024, 3, 5), truth="yes", features={"y": 1.0})]

    with pytest.raises(SchemaMismatch):
        BoardModelScorer(board, "clf").score(records)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_endpoint_scorer_posts_feature_array(make_record):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=["yes", "no"])

    scorer = EndpointScorer("http://scorer.test/", client=_client(handler))
    records = [
        make_record("2024-03-05T08:00:00", "yes", 1.0),
        make_record("2024-03-05T09:00:00", "yes", -1.0),
    ]

    scored = scorer.score(records)

    assert seen["path"] == "/predict"
    assert seen["body"] == [{"x": 1.0}, {"x": -1.0}]
    assert [(s.truth, s.prediction) for s in scored] == [("yes", "yes"), ("yes", "no")]
    assert scored[0].score is None


def test_endpoint_scorer_empty_batch_makes_no_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert EndpointScorer("http://scorer.test", client=_client(handler)).score([]) == []


@pytest.mark.parametrize(
    "status,body,error",
    [
        (422, {"detail": "missing x"}, SchemaMismatch),
        (503, {"detail": "no model"}, ModelUnavailable),
        (200, ["yes"], SchemaMismatch),
        (200, {"predict": ["yes", "no"]}, SchemaMismatch),
    ],
)
def test_endpoint_scorer_errors(status, body, error, make_record):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body)

    records = [
        make_record("2024-03-05T08:00:00", "yes", 1.0),
        make_record("2024-03-05T09:00:00", "no", -1.0),
    ]
    with pytest.raises(error):
        EndpointScorer("http://scorer.test", client=_client(handler)).score(records)


def test_endpoint_unreachable_is_model_unavailable(make_record):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ModelUnavailable):
        EndpointScorer("http://scorer.test", client=_client(handler)).score(
            [make_record("2024-03-05T08:00:00", "yes", 1.0)]
        )


def test_endpoint_served_model_reads_metadata():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/metadata"
        return httpx.Response(200, json={"model_name": "clf", "model_version": 3})

    info = EndpointScorer("http://scorer.test", client=_client(handler)).served_model()
    assert (info.model_name, info.model_version) == ("clf", 3)


def test_endpoint_non_json_prediction_body_is_model_unavailable(make_record):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(ModelUnavailable, match="non-JSON"):
        EndpointScorer("http://scorer.test", client=_client(handler)).score(
            [make_record("2024-03-05T08:00:00", "yes", 1.0)]
        )


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json=["clf", 3]),
        httpx.Response(200, json={"model_name": "clf", "model_version": "latest"}),
    ],
)
def test_endpoint_bad_metadata_is_model_unavailable(response):
    def handler(request: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(ModelUnavailable):
        EndpointScorer("http://scorer.test", client=_client(handler)).served_model()
