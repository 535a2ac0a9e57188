from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .journal import HH_MM_PATTERN

USER_SETTINGS_PREFIX = "user."


class UserSettings(BaseModel):
    theme: Literal["Light", "Dark"] = "Light"
    notifications_enabled: bool = True
    notification_time: str = Field(default="20:00", pattern=HH_MM_PATTERN)
    auto_backup: bool = False
    backup_frequency: int = Field(default=7, ge=1)
    export_format: Literal["PDF", "Markdown"] = "PDF"
    show_mood_reminder: bool = True
    default_mood: str = Field(default="Neutral", min_length=1, max_length=50)


class UserSettingsUpdate(BaseModel):
    theme: Literal["Light", "Dark"] | None = None
    notifications_enabled: bool | None = None
    notification_time: str | None = Field(default=None, pattern=HH_MM_PATTERN)
    auto_backup: bool | None = None
    backup_frequency: int | None = Field(default=None, ge=1)
    export_format: Literal["PDF", "Markdown"] | None = None
    show_mood_reminder: bool | None = None
    default_mood: str | None = Field(default=None, min_length=1, max_length=50)


def settings_key(field: str) -> str:
    return f"{USER_SETTINGS_PREFIX}{field}"
