from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import date, timedelta
from itertools import pairwise

from ..schemas.analytics import StreakInfo
from .filters import EntryLike, entry_day

ONE_DAY = timedelta(days=1)
DEFAULT_WINDOW_DAYS = 30


def distinct_dates(entries: Iterable[EntryLike]) -> set[date]:
    return {entry_day(entry) for entry in entries}


def current_streak(dates: Collection[date], today: date) -> int:
    """Run of consecutive days ending today, or yesterday when today has no entry yet."""

    if today in dates:
        check = today
    elif today - ONE_DAY in dates:
        check = today - ONE_DAY
    else:
        return 0

    streak = 0
    while check in dates:
        streak += 1
        check -= ONE_DAY
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    sorted_dates = sorted(set(dates))
    if not sorted_dates:
        return 0
    streak = 1
    longest = 1
    for previous, current in pairwise(sorted_dates):
        if current - previous == ONE_DAY:
            streak += 1
            longest = max(longest, streak)
        else:
            streak = 1
    return longest


def missed_days(
    dates: Collection[date],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[date]:
    """Days without an entry in the window ending today; today itself never counts.

    The window starts at ``today - (window_days - 1)``, so the default of 30 checks
    the 29 days from ``today - 29`` to yesterday. ``today - 30`` is outside the
    window and is never reported, even when it has no entry.
    """

    window_start = today - timedelta(days=window_days - 1)
    missed = []
    for offset in range(window_days - 1):
        day = window_start + timedelta(days=offset)
        if day not in dates:
            missed.append(day)
    return missed


def compute_streak_info(
    entries: Iterable[EntryLike],
    *,
    today: date | None = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> StreakInfo:
    entries = list(entries)
    if not entries:
        return StreakInfo()

    today = today or date.today()
    dates = distinct_dates(entries)
    return StreakInfo(
        current_streak=current_streak(dates, today),
        longest_streak=longest_streak(dates),
        last_entry_date=max(dates),
        is_active_today=today in dates,
        total_entries=len(entries),
        missed_days=missed_days(dates, today, window_days),
    )


def mood_streak(
    entries: Iterable[EntryLike],
    mood: str,
    *,
    today: date | None = None,
) -> int:
    """Current streak counting only entries whose primary mood is ``mood``."""

    today = today or date.today()
    dates = distinct_dates(entry for entry in entries if entry.primary_mood == mood)
    return current_streak(dates, today)


__all__ = [
    "compute_streak_info",
    "current_streak",
    "distinct_dates",
    "longest_streak",
    "missed_days",
    "mood_streak",
]
