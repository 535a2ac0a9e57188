"""Predicate-based narrowing of journal entries.

All functions take an already materialized sequence of entries (ORM rows
or ``JournalEntryModel`` snapshots) and return new lists; the input is
never mutated. Dates are compared by calendar day only.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from datetime import date, datetime
from typing import Protocol, TypeVar


class EntryLike(Protocol):
    entry_date: date
    title: str
    content: str
    primary_mood: str
    word_count: int

    @property
    def tags(self) -> list[str]: ...


E = TypeVar("E", bound=EntryLike)


def as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def entry_day(entry: EntryLike) -> date:
    return as_day(entry.entry_date)


def in_date_range(
    entry: EntryLike,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
) -> bool:
    day = entry_day(entry)
    if start is not None and day < as_day(start):
        return False
    if end is not None and day > as_day(end):
        return False
    return True


def matches_any_tag(entry: EntryLike, wanted: Collection[str] | None) -> bool:
    if not wanted:
        return True
    return not set(entry.tags).isdisjoint(wanted)


def matches_query(entry: EntryLike, query: str | None) -> bool:
    if query is None or not query.strip():
        return True
    needle = query.lower()
    if needle in (entry.title or "").lower():
        return True
    if needle in (entry.content or "").lower():
        return True
    if needle in (entry.primary_mood or "").lower():
        return True
    return any(needle in tag.lower() for tag in entry.tags)


def filter_entries(
    entries: Iterable[E],
    *,
    start: date | datetime | None = None,
    end: date | datetime | None = None,
    moods: Collection[str] | None = None,
    tags: Collection[str] | None = None,
    query: str | None = None,
) -> list[E]:
    """Keep entries matching every supplied criterion, in their original order.

    ``moods`` and ``tags`` both match against the entry's tag list; an
    empty or missing collection disables that criterion.
    """

    result = [entry for entry in entries if in_date_range(entry, start, end)]
    if moods:
        result = [entry for entry in result if matches_any_tag(entry, moods)]
    if tags:
        result = [entry for entry in result if matches_any_tag(entry, tags)]
    if query is not None and query.strip():
        result = [entry for entry in result if matches_query(entry, query)]
    return result


def search_entries(entries: Iterable[E], query: str | None) -> list[E]:
    """Text search, newest entries first."""

    matched = filter_entries(entries, query=query)
    return sorted(matched, key=entry_day, reverse=True)


def entries_by_month(entries: Sequence[E], year: int, month: int) -> dict[date, E]:
    days: dict[date, E] = {}
    for entry in entries:
        day = entry_day(entry)
        if day.year == year and day.month == month:
            days.setdefault(day, entry)
    return dict(sorted(days.items()))


__all__ = [
    "EntryLike",
    "as_day",
    "entries_by_month",
    "entry_day",
    "filter_entries",
    "in_date_range",
    "matches_any_tag",
    "matches_query",
    "search_entries",
]
