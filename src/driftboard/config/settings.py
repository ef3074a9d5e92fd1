from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized config.

    Key idea:
    - read from env first (so tests/CI can override),
    - otherwise default to local dev values.

    Pipeline stages never read this directly; build a MonitorConfig from it
    and pass that (plus a Board) explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="DRIFTBOARD_",
        extra="ignore",
        protected_namespaces=("settings_",),
    )

    # DuckDB file by default (portable, zero-setup)
    board_url: str = "duckdb:///data/driftboard.duckdb"
    # shared-access secret for remote boards, injected as the URL password
    board_credential: str | None = None

    # prediction endpoint (the container built from Dockerfile)
    endpoint_url: str = "http://localhost:8080"
    http_timeout_s: float = 20.0

    model_name: str = "classifier"
    model_version: int | None = None
    history_name: str = "classifier_metrics"

    period: str = "day"
    metrics: list[str] = ["accuracy"]

    # monitor against an endpoint serving an older/newer model than the board
    allow_stale_model: bool = False

    log_level: str = "INFO"


settings = Settings()
