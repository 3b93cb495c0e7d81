"""Runtime settings for the work-log engine."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # JSON blob backing the log store; None keeps everything in memory
    data_path: str | None = None

    enforce_unique_dates: bool = False
    week_starts_on: Literal["sunday", "monday"] = "sunday"
    log_level: str = "INFO"

    # load .env, ignore unknown keys so new vars don't break boot
    model_config = SettingsConfigDict(
        env_prefix="WORKLOG_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts and the demo UI."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
