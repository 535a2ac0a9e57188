"""Pure analytics, streak and filter engines over journal entries."""

from .analytics import (
    category_percentages,
    compute_analytics,
    mood_distribution,
    most_frequent_mood,
    tag_frequency,
    tag_usage_count,
    word_count_trend,
)
from .filters import entries_by_month, filter_entries, search_entries
from .streaks import compute_streak_info, longest_streak, missed_days, mood_streak

__all__ = [
    "category_percentages",
    "compute_analytics",
    "compute_streak_info",
    "entries_by_month",
    "filter_entries",
    "longest_streak",
    "missed_days",
    "mood_distribution",
    "mood_streak",
    "most_frequent_mood",
    "search_entries",
    "tag_frequency",
    "tag_usage_count",
    "word_count_trend",
]
