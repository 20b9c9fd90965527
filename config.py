# config.py
# Settings come from PRIORITY_* environment variables or a local .env file.

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PRIORITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_title: str = "Campus Issue Priority Engine API"
    log_level: str = "INFO"

    # ── Scoring ──────────────────────────────────────────────
    batch_max_workers: Optional[int] = None   # None/1 = score batches inline

    # ── Spreadsheet ingest bot ───────────────────────────────
    ingest_enabled: bool = True
    incoming_dir: str = "incoming"
    processed_dir: str = "processed"
    ingest_interval_seconds: int = 30


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
