from __future__ import annotations

from datetime import date, datetime

import pytest

from moodlog.app.insights import entries_by_month, filter_entries, search_entries


@pytest.fixture()
def entries(make_entry):
    return [
        make_entry(date(2024, 2, 1), "Happy", ["Work"], "Shipped the release", "Launch"),
        make_entry(date(2024, 2, 5), "Anxious", ["Health"], "Doctor visit", "Checkup"),
        make_entry(date(2024, 2, 9), "Calm", ["Family", "Food"], "Long dinner", "Sunday"),
        make_entry(date(2024, 3, 1), "Tired", [], "Nothing much", "Meh"),
    ]


def test_no_criteria_returns_input(entries) -> None:
    assert filter_entries(entries) == entries


def test_date_range_is_inclusive(entries) -> None:
    result = filter_entries(entries, start=date(2024, 2, 5), end=date(2024, 2, 9))

    assert [entry.title for entry in result] == ["Checkup", "Sunday"]


def test_date_range_compares_calendar_day(entries) -> None:
    result = filter_entries(entries, end=datetime(2024, 2, 5, 0, 0))

    assert [entry.title for entry in result] == ["Launch", "Checkup"]


def test_open_bounds(entries) -> None:
    assert len(filter_entries(entries, start=date(2024, 2, 6))) == 2
    assert len(filter_entries(entries, end=date(2024, 2, 1))) == 1


def test_disjoint_mood_set_returns_nothing(entries) -> None:
    assert filter_entries(entries, moods={"Travel"}) == []


def test_empty_mood_set_is_ignored(entries) -> None:
    assert filter_entries(entries, moods=set(), start=date(2024, 2, 2)) == entries[1:]


def test_tag_intersection(entries) -> None:
    result = filter_entries(entries, tags=["Food", "Work"])

    assert [entry.title for entry in result] == ["Launch", "Sunday"]


def test_query_matches_any_text_field(entries) -> None:
    assert [e.title for e in filter_entries(entries, query="DOCTOR")] == ["Checkup"]
    assert [e.title for e in filter_entries(entries, query="launch")] == ["Launch"]
    assert [e.title for e in filter_entries(entries, query="calm")] == ["Sunday"]
    assert [e.title for e in filter_entries(entries, query="heal")] == ["Checkup"]


def test_blank_query_is_ignored(entries) -> None:
    assert filter_entries(entries, query="   ") == entries


def test_filters_compose(entries) -> None:
    result = filter_entries(
        entries,
        start=date(2024, 2, 2),
        tags=["Health", "Family"],
        query="dinner",
    )

    assert [entry.title for entry in result] == ["Sunday"]


def test_search_orders_newest_first(entries) -> None:
    result = search_entries(entries, "")

    assert [entry.title for entry in result] == ["Meh", "Sunday", "Checkup", "Launch"]


def test_entries_by_month(entries, make_entry) -> None:
    extra = make_entry(date(2024, 2, 1), "Sad", title="Second")

    days = entries_by_month([*entries, extra], 2024, 2)

    assert list(days) == [date(2024, 2, 1), date(2024, 2, 5), date(2024, 2, 9)]
    assert days[date(2024, 2, 1)].title == "Launch"
