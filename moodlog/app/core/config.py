from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moodlog.db import normalize_database_url


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/moodlog.db",
        alias="DATABASE_URL",
    )

    # Logging
    log_file: Path = Field(default=Path("logs/moodlog.log"))
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_max_bytes: int = Field(default=1_000_000, alias="LOG_MAX_BYTES")
    log_backup_count: int = Field(default=3, alias="LOG_BACKUP_COUNT")

    # Export
    export_dir: Path = Field(default=Path("exports"), alias="EXPORT_DIR")
    pdf_font_path: Path | None = Field(default=None, alias="PDF_FONT_PATH")

    # Analytics presentation
    tag_display_limit: int = Field(default=10, alias="TAG_DISPLAY_LIMIT")
    missed_days_window: int = Field(default=30, alias="MISSED_DAYS_WINDOW")

    version: str = Field(default_factory=lambda: Settings._load_version())

    @staticmethod
    def _load_version() -> str:
        if version := os.getenv("VERSION"):
            return version
        version_file = Path("VERSION")
        if version_file.exists():
            return version_file.read_text(encoding="utf-8").strip()
        return "0.0.0"

    @field_validator("database_url", mode="before")
    @classmethod
    def _validate_database_url(cls, value: str | None) -> str:
        return normalize_database_url(value)

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Path | str) -> Path:
        path = Path(value)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: str | None) -> str:
        level = str(value or "INFO").upper()
        if level not in logging.getLevelNamesMapping():
            return "INFO"
        return level

    @field_validator("pdf_font_path", mode="before")
    @classmethod
    def _validate_font_path(cls, value: Path | str | None) -> Path | None:
        return Path(value) if value else None

    @field_validator(
        "tag_display_limit",
        "missed_days_window",
        "log_max_bytes",
        "log_backup_count",
        mode="before",
    )
    @classmethod
    def _at_least_one(cls, value: int | str | None) -> int:
        if value is None or value == "":
            return 1
        return max(int(value), 1)


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()
