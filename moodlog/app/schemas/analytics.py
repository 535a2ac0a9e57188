from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

NOT_AVAILABLE = "N/A"


class WordCountTrend(BaseModel):
    entry_date: date
    word_count: int = Field(ge=0)


class AnalyticsData(BaseModel):
    total_entries: int = 0
    total_words: int = 0
    average_words_per_entry: int = 0
    entries_this_week: int = 0
    entries_this_month: int = 0
    mood_distribution: dict[str, int] = Field(default_factory=dict)
    most_frequent_mood: str = NOT_AVAILABLE
    tag_frequency: dict[str, int] = Field(default_factory=dict)
    category_percentages: dict[str, float] = Field(default_factory=dict)
    word_count_trends: list[WordCountTrend] = Field(default_factory=list)


class StreakInfo(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_entry_date: date | None = None
    is_active_today: bool = False
    total_entries: int = 0
    missed_days: list[date] = Field(default_factory=list)


class MoodCatalog(BaseModel):
    moods: list[str]
    categories: dict[str, list[str]]
    suggested_tags: list[str]
    emoji: dict[str, str]


class MoodStreakResponse(BaseModel):
    mood: str
    streak: int


class TagUsageResponse(BaseModel):
    tag: str
    count: int
