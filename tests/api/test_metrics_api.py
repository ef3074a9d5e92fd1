"""API tests for metric history read-back."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from driftboard.api.deps import get_board
from driftboard.api.main import app
from driftboard.models.domain import MetricRow
from driftboard.services.recorder import MetricRecorder


@pytest.fixture
def client(board):
    app.dependency_overrides[get_board] = lambda: board
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_read_history(client, board):
    recorder = MetricRecorder(board)
    recorder.append("hist", [MetricRow(bucket=datetime(2024, 3, 5), metric="accuracy", value=0.75, count=4)])
    recorder.append(
        "hist",
        [MetricRow(bucket=datetime(2024, 3, 6), metric="accuracy", value=0.5, count=2)],
        metadata={"model_version": 1},
    )

    res = client.get("/api/metrics/hist")
    assert res.status_code == 200
    data = res.json()
    assert data["version"] == 2
    assert [(r["value"], r["count"]) for r in data["rows"]] == [(0.75, 4), (0.5, 2)]

    res = client.get("/api/metrics/hist", params={"version": 1})
    assert len(res.json()["rows"]) == 1

    res = client.get("/api/metrics/hist/versions")
    versions = res.json()
    assert [v["version"] for v in versions] == [1, 2]
    assert versions[0]["metadata"] is None
    assert versions[1]["metadata"] == {"model_version": 1}


def test_unknown_history_is_empty(client):
    res = client.get("/api/metrics/never_recorded")
    assert res.status_code == 200
    assert res.json() == {"history_name": "never_recorded", "version": None, "rows": []}
