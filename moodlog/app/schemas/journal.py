from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..core.moods import emoji_for
from ..core.tags import TAG_SEPARATOR

HH_MM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _clean_mood(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise ValueError("primary mood is required")
    return stripped


def _clean_tags(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    tags = []
    for tag in value:
        if TAG_SEPARATOR in tag:
            raise ValueError(f"tag must not contain {TAG_SEPARATOR!r}: {tag!r}")
        if tag.strip():
            tags.append(tag.strip())
    return tags


class JournalEntryCreate(BaseModel):
    entry_date: date = Field(default_factory=date.today)
    title: str = Field(default="", max_length=255)
    content: str = Field(default="")
    primary_mood: str = Field(..., min_length=1, max_length=50)
    secondary_mood1: str | None = Field(default=None, max_length=50)
    secondary_mood2: str | None = Field(default=None, max_length=50)
    wake_up_time: str | None = Field(default=None, pattern=HH_MM_PATTERN)
    sleep_time: str | None = Field(default=None, pattern=HH_MM_PATTERN)
    tags: list[str] = Field(default_factory=list)

    @field_validator("primary_mood")
    @classmethod
    def _strip_mood(cls, value: str) -> str:
        return _clean_mood(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)


class JournalEntryUpdate(BaseModel):
    """Partial update; fields left out of the request keep their stored values."""

    entry_date: date | None = None
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    primary_mood: str | None = Field(default=None, min_length=1, max_length=50)
    secondary_mood1: str | None = Field(default=None, max_length=50)
    secondary_mood2: str | None = Field(default=None, max_length=50)
    wake_up_time: str | None = Field(default=None, pattern=HH_MM_PATTERN)
    sleep_time: str | None = Field(default=None, pattern=HH_MM_PATTERN)
    tags: list[str] | None = None

    @field_validator("primary_mood")
    @classmethod
    def _strip_mood(cls, value: str | None) -> str | None:
        return _clean_mood(value)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)

    def changes(self) -> dict[str, object]:
        """Supplied fields; an explicit null only clears the optional columns."""

        values = self.model_dump(exclude_unset=True)
        for name in ("entry_date", "title", "content", "primary_mood", "tags"):
            if name in values and values[name] is None:
                del values[name]
        return values


class JournalEntryModel(BaseModel):
    id: int
    entry_date: date
    title: str
    content: str
    primary_mood: str
    secondary_mood1: str | None = None
    secondary_mood2: str | None = None
    category: str
    wake_up_time: str | None = None
    sleep_time: str | None = None
    tags: list[str]
    word_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field(return_type=str)
    def emoji(self) -> str:
        return emoji_for(self.primary_mood)


class JournalListResponse(BaseModel):
    items: list[JournalEntryModel]


class JournalCreateResponse(BaseModel):
    ok: bool = True
    id: int


class CalendarDay(BaseModel):
    day: date
    entry: JournalEntryModel


class CalendarResponse(BaseModel):
    year: int
    month: int = Field(ge=1, le=12)
    days: list[CalendarDay]


class ExportResponse(BaseModel):
    ok: bool = True
    path: str
