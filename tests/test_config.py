"""Tests for validated monitoring configuration."""

import pytest
from pydantic import ValidationError

from driftboard.config.monitor_config import MonitorConfig
from driftboard.config.settings import Settings


def _config(**overrides) -> MonitorConfig:
    values = {
        "endpoint_url": "http://localhost:8080/",
        "board_url": "duckdb:///data/board.duckdb",
        "model_name": "clf",
        "history_name": "clf_metrics",
    }
    values.update(overrides)
    return MonitorConfig(**values)


def test_defaults_and_normalisation():
    config = _config(period="WEEK", metrics=("f1", "accuracy", "f1"))
    assert config.endpoint_url == "http://localhost:8080"
    assert config.period == "week"
    assert config.metrics == ("f1", "accuracy")


@pytest.mark.parametrize(
    "overrides",
    [
        {"endpoint_url": "localhost:8080"},
        {"board_url": "data/board.duckdb"},
        {"period": "fortnight"},
        {"metrics": ("accuracy", "auc")},
        {"metrics": ()},
        {"model_name": ""},
        {"model_version": 0},
        {"http_timeout_s": 0},
        {"board_credential": "sig=abc"},
        {"board_url": "sqlite:///board.db", "board_credential": "sig=abc"},
    ],
)
def test_invalid_fields_rejected(overrides):
    with pytest.raises(ValidationError):
        _config(**overrides)


def test_from_settings_ignores_none_overrides(monkeypatch):
    monkeypatch.setenv("DRIFTBOARD_BOARD_URL", "postgresql://monitor@board.internal/driftboard")
    monkeypatch.setenv("DRIFTBOARD_BOARD_CREDENTIAL", "sig=secret")
    monkeypatch.setenv("DRIFTBOARD_METRICS", '["accuracy", "recall"]')
    settings = Settings()

    config = MonitorConfig.from_settings(settings, history_name="override", period=None)

    assert config.history_name == "override"
    assert config.period == settings.period
    assert config.metrics == ("accuracy", "recall")
    assert config.board_credential.get_secret_value() == "sig=secret"
    assert "secret" not in repr(config)


@pytest.mark.parametrize(
    "board_url",
    ["postgresql://monitor@board.internal/driftboard", "duckdb:///md:driftboard"],
)
def test_credential_accepted_for_remote_boards(board_url):
    config = _config(board_url=board_url, board_credential="sig=abc")
    assert config.board_credential.get_secret_value() == "sig=abc"
