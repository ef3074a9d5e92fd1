"""Global test fixtures."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from driftboard.config.monitor_config import MonitorConfig  # noqa: E402
from driftboard.db.engine import build_engine  # noqa: E402
from driftboard.db.init_db import ensure_db  # noqa: E402
from driftboard.models.domain import LabeledRecord  # noqa: E402
from driftboard.repos.board_repo import BoardRepository  # noqa: E402
from driftboard.services.model_artifact import LogisticModel  # noqa: E402


@pytest.fixture
def board_url(tmp_path) -> str:
    return f"duckdb:///{tmp_path / 'board.duckdb'}"


@pytest.fixture
def board(board_url) -> BoardRepository:
    engine = build_engine(board_url)
    ensure_db(engine)
    yield BoardRepository(engine)
    engine.dispose()


@pytest.fixture
def sign_model() -> LogisticModel:
    # x >= 0 -> "yes", x < 0 -> "no"
    return LogisticModel(
        feature_names=("x",),
        weights=(4.0,),
        intercept=0.0,
        classes=("no", "yes"),
    )


@pytest.fixture
def monitor_config(board_url) -> MonitorConfig:
    return MonitorConfig(
        endpoint_url="http://scorer.test",
        board_url=board_url,
        model_name="clf",
        history_name="clf_metrics",
    )


@pytest.fixture
def make_record():
    def _make(ts: str, truth: str, x: float) -> LabeledRecord:
        return LabeledRecord(observed_at=datetime.fromisoformat(ts), truth=truth, features={"x": x})

    return _make
