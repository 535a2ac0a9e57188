from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from ..core.moods import category_of
from ..schemas.analytics import NOT_AVAILABLE, AnalyticsData, WordCountTrend
from .filters import EntryLike, entry_day, filter_entries


def mood_distribution(entries: Iterable[EntryLike]) -> dict[str, int]:
    """Count entries per mood category, in first-encounter order."""

    counts: Counter[str] = Counter()
    for entry in entries:
        counts[category_of(entry.primary_mood)] += 1
    return dict(counts)


def category_percentages(distribution: dict[str, int], total: int) -> dict[str, float]:
    if total <= 0:
        return {}
    return {category: 100 * count / total for category, count in distribution.items()}


def _tag_counter(entries: Iterable[EntryLike]) -> Counter[str]:
    counts: Counter[str] = Counter()
    for entry in entries:
        for tag in entry.tags:
            if tag.strip():
                counts[tag] += 1
    return counts


def tag_frequency(entries: Iterable[EntryLike], limit: int | None = None) -> dict[str, int]:
    """Tag counts sorted by descending count; ties keep first-seen order."""

    return dict(_tag_counter(entries).most_common(limit))


def most_frequent_mood(entries: Iterable[EntryLike]) -> str:
    # Ranked over the tag list, not primary_mood.
    counts = _tag_counter(entries)
    if not counts:
        return NOT_AVAILABLE
    return counts.most_common(1)[0][0]


def tag_usage_count(entries: Iterable[EntryLike], tag: str) -> int:
    return sum(1 for entry in entries if tag in entry.tags)


def word_count_trend(entries: Iterable[EntryLike]) -> list[WordCountTrend]:
    return [
        WordCountTrend(entry_date=entry_day(entry), word_count=entry.word_count)
        for entry in sorted(entries, key=entry_day)
    ]


def _week_bounds(today: date) -> tuple[date, date]:
    week_start = today - timedelta(days=today.weekday())
    return week_start, week_start + timedelta(days=6)


def compute_analytics(
    entries: Sequence[EntryLike],
    *,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    today: date | None = None,
    tag_limit: int | None = None,
) -> AnalyticsData:
    """Reduce entries to aggregate statistics; empty input yields zero defaults."""

    today = today or date.today()
    if start is not None or end is not None:
        selected = filter_entries(entries, start=start, end=end)
    else:
        selected = list(entries)

    total_entries = len(selected)
    total_words = sum(entry.word_count for entry in selected)
    average = total_words // total_entries if total_entries else 0

    week_start, week_end = _week_bounds(today)
    days = [entry_day(entry) for entry in selected]
    entries_this_week = sum(1 for day in days if week_start <= day <= week_end)
    entries_this_month = sum(
        1 for day in days if day.year == today.year and day.month == today.month
    )

    distribution = mood_distribution(selected)

    return AnalyticsData(
        total_entries=total_entries,
        total_words=total_words,
        average_words_per_entry=average,
        entries_this_week=entries_this_week,
        entries_this_month=entries_this_month,
        mood_distribution=distribution,
        most_frequent_mood=most_frequent_mood(selected),
        tag_frequency=tag_frequency(selected, tag_limit),
        category_percentages=category_percentages(distribution, total_entries),
        word_count_trends=word_count_trend(selected),
    )


__all__ = [
    "category_percentages",
    "compute_analytics",
    "mood_distribution",
    "most_frequent_mood",
    "tag_frequency",
    "tag_usage_count",
    "word_count_trend",
]
