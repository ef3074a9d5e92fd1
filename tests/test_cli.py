"""CLI smoke tests against a temporary board."""

import csv
from pathlib import Path

import pytest
from typer.testing import CliRunner

from driftboard.cli.app import app

runner = CliRunner()


def _write_csv(path: Path, rows: list[tuple[str, str, float]]) -> Path:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["observed_at", "label", "x"])
        writer.writerows(rows)
    return path


@pytest.fixture
def train_csv(tmp_path) -> Path:
    rows = []
    for i in range(12):
        x = 1.0 + i / 10 if i % 2 == 0 else -1.0 - i / 10
        rows.append((f"2024-02-{i + 1:02d}", "yes" if x > 0 else "no", x))
    return _write_csv(tmp_path / "train.csv", rows)


def test_train_monitor_and_read_back(tmp_path, board_url, train_csv):
    result = runner.invoke(app, ["init-db", "--board-url", board_url])
    assert result.exit_code == 0, result.output

    result = runner.invoke(
        app,
        ["train-model", "--dataset", str(train_csv), "--model-name", "clf", "--board-url", board_url],
    )
    assert result.exit_code == 0, result.output
    assert "clf v1" in result.output

    batch = _write_csv(
        tmp_path / "batch.csv",
        [("2024-03-05T08:00:00", "yes", 2.0), ("2024-03-05T09:00:00", "yes", -2.0)],
    )
    result = runner.invoke(
        app,
        [
            "monitor",
            "--dataset", str(batch),
            "--model-name", "clf",
            "--history-name", "clf_metrics",
            "--metric", "accuracy",
            "--metric", "f1",
            "--board-url", board_url,
        ],
    )
    assert result.exit_code == 0, result.output
    assert "clf_metrics v1" in result.output

    result = runner.invoke(app, ["show-history", "--history-name", "clf_metrics", "--board-url", board_url])
    assert result.exit_code == 0, result.output
    assert "accuracy" in result.output
    assert "0.5000" in result.output

    out = tmp_path / "metrics.png"
    result = runner.invoke(
        app,
        ["plot-history", "--history-name", "clf_metrics", "--out", str(out), "--board-url", board_url],
    )
    assert result.exit_code == 0, result.output
    assert out.exists()

    result = runner.invoke(app, ["list-artifacts", "--board-url", board_url])
    assert result.exit_code == 0, result.output
    assert "clf_metrics" in result.output


def test_monitor_without_model_exits_nonzero(tmp_path, board_url):
    batch = _write_csv(tmp_path / "batch.csv", [("2024-03-05", "yes", 1.0)])
    result = runner.invoke(
        app,
        ["monitor", "--dataset", str(batch), "--model-name", "absent", "--board-url", board_url],
    )
    assert result.exit_code == 1
    assert "ModelUnavailable" in result.output


def test_invalid_period_exits_nonzero(tmp_path, board_url):
    batch = _write_csv(tmp_path / "batch.csv", [("2024-03-05", "yes", 1.0)])
    result = runner.invoke(
        app,
        ["monitor", "--dataset", str(batch), "--period", "fortnight", "--board-url", board_url],
    )
    assert result.exit_code == 1
    assert "invalid configuration" in result.output
