# newsfeed/config.py
from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import (
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    SUMMARY_MAX_CHARS,
)


PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    # Published sheet (CSV export or Apps Script JSON endpoint)
    feed_url: str | None = None
    feed_format: Literal["auto", "csv", "json"] = "auto"

    # NEWSFEED_AUTO_REFRESH=false keeps the poller off at startup
    auto_refresh: bool = True
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    display_timezone: str = "UTC"
    summary_max_chars: int = SUMMARY_MAX_CHARS

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="NEWSFEED_",
        env_file=str(ENV_PATH) if ENV_PATH.exists() else None,
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
