"""One monitoring run: score, aggregate, record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from driftboard.config.monitor_config import MonitorConfig
from driftboard.errors import StaleModel
from driftboard.models.domain import LabeledRecord, MetricRow
from driftboard.repos.board_repo import BoardRepository, utcnow
from driftboard.services.aggregation import compute_metric_rows
from driftboard.services.recorder import MetricRecorder
from driftboard.services.scoring import Scorer, ServedModelInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonitoringResult:
    history_name: str
    history_version: Optional[int]
    n_records: int
    rows: List[MetricRow]
    served_model: ServedModelInfo
    board_model_version: Optional[int]


def check_model_version(
    board: BoardRepository,
    config: MonitorConfig,
    served: ServedModelInfo,
) -> Optional[int]:
    """
    Compare the model the scorer evaluates with the one the board expects.

    The expected version is the pinned `config.model_version` or, when unset,
    the board's latest. A divergence raises StaleModel unless
    `config.allow_stale_model` is set, in which case it is only logged.
    """
    expected = config.model_version or board.latest_version(config.model_name)
    diverged = served.model_name != config.model_name or served.model_version != expected
    if not diverged:
        return expected

    if not config.allow_stale_model:
        raise StaleModel(config.model_name, expected, served.model_version)
    logger.warning(
        "Monitoring %s v%s while the board expects %s v%s",
        served.model_name,
        served.model_version,
        config.model_name,
        expected,
    )
    return expected


def run_monitoring(
    board: BoardRepository,
    config: MonitorConfig,
    scorer: Scorer,
    records: Sequence[LabeledRecord],
    now_fn: Callable[[], datetime] = utcnow,
) -> MonitoringResult:
    """
    Score a labeled batch, aggregate per period and append to the history.

    Any failure propagates before the board is written, so the previous
    history version stays the latest one.
    """
    logger.info(
        "Monitoring run: %d records, model=%s, history=%s, period=%s",
        len(records),
        config.model_name,
        config.history_name,
        config.period,
    )

    served = scorer.served_model()
    board_version = check_model_version(board, config, served)

    scored = scorer.score(records)
    logger.info("Scored %d records with %s v%s", len(scored), served.model_name, served.model_version)

    rows = compute_metric_rows(scored, period=config.period, metrics=config.metrics)
    if not rows:
        logger.info("No records in batch; history %s left unchanged", config.history_name)
        return MonitoringResult(
            history_name=config.history_name,
            history_version=board.latest_version(config.history_name),
            n_records=0,
            rows=[],
            served_model=served,
            board_model_version=board_version,
        )

    version = MetricRecorder(board).append(
        config.history_name,
        rows,
        metadata={
            "model_name": served.model_name,
            "model_version": served.model_version,
            "board_model_version": board_version,
            "period": config.period,
            "metrics": list(config.metrics),
            "n_records": len(scored),
            "recorded_at": now_fn().isoformat(),
        },
    )
    logger.info("Appended %d metric rows to %s v%d", len(rows), config.history_name, version)

    return MonitoringResult(
        history_name=config.history_name,
        history_version=version,
        n_records=len(scored),
        rows=rows,
        served_model=served,
        board_model_version=board_version,
    )
