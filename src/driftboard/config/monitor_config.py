"""Validated configuration passed into every pipeline stage."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from driftboard.config.settings import Settings
from driftboard.db.engine import credential_accepted
from driftboard.services.aggregation import METRICS, PERIODS


class MonitorConfig(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    endpoint_url: str
    board_url: str
    board_credential: Optional[SecretStr] = None

    model_name: str = Field(min_length=1)
    model_version: Optional[int] = Field(default=None, ge=1)
    history_name: str = Field(min_length=1)

    period: str = "day"
    metrics: tuple[str, ...] = ("accuracy",)

    http_timeout_s: float = Field(default=20.0, gt=0)
    allow_stale_model: bool = False

    @field_validator("endpoint_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("endpoint_url must be an http(s) URL")
        return value

    @field_validator("board_url")
    @classmethod
    def _sqlalchemy_url(cls, value: str) -> str:
        value = value.strip()
        if "://" not in value:
            raise ValueError("board_url must be a SQLAlchemy URL, e.g. duckdb:///data/board.duckdb")
        try:
            make_url(value)
        except ArgumentError as e:
            raise ValueError(f"board_url is not a valid SQLAlchemy URL: {e}") from e
        return value

    @field_validator("period")
    @classmethod
    def _known_period(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in PERIODS:
            raise ValueError(f"period must be one of {sorted(PERIODS)}")
        return value

    @field_validator("metrics")
    @classmethod
    def _known_metrics(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one metric is required")
        unknown = [m for m in value if m not in METRICS]
        if unknown:
            raise ValueError(f"unknown metrics {unknown}; choose from {sorted(METRICS)}")
        return tuple(dict.fromkeys(value))

    @model_validator(mode="after")
    def _credential_fits_board(self) -> "MonitorConfig":
        if self.board_credential is not None and not credential_accepted(self.board_url):
            raise ValueError(
                "board_credential is only used by server or MotherDuck boards; "
                "local DuckDB/SQLite files take no credential"
            )
        return self

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> "MonitorConfig":
        """Build from env-backed settings; `None` overrides are ignored."""
        values = {
            "endpoint_url": settings.endpoint_url,
            "board_url": settings.board_url,
            "board_credential": settings.board_credential,
            "model_name": settings.model_name,
            "model_version": settings.model_version,
            "history_name": settings.history_name,
            "period": settings.period,
            "metrics": tuple(settings.metrics),
            "http_timeout_s": settings.http_timeout_s,
            "allow_stale_model": settings.allow_stale_model,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
