from __future__ import annotations

import pytest
from pydantic import ValidationError

from moodlog.app.core.moods import ALL_MOODS, MOOD_CATEGORIES, category_of, emoji_for
from moodlog.app.core.tags import count_words, join_tags, split_tags
from moodlog.app.schemas.journal import JournalEntryCreate, JournalEntryUpdate
from moodlog.app.schemas.settings import UserSettingsUpdate


@pytest.mark.parametrize(
    ("mood", "category"),
    [
        ("Happy", "Positive"),
        ("Frustrated", "Negative"),
        ("Confused", "Neutral"),
        ("Neutral", "General"),
        ("", "General"),
    ],
)
def test_category_of(mood: str, category: str) -> None:
    assert category_of(mood) == category


def test_every_mood_has_a_category() -> None:
    categorized = {mood for moods in MOOD_CATEGORIES.values() for mood in moods}
    assert categorized == set(ALL_MOODS)


def test_emoji_fallback() -> None:
    assert emoji_for("Happy") == "😊"
    assert emoji_for("Bewildered") == "😐"


def test_tag_round_trip_ignores_whitespace() -> None:
    tags = ["Work", " Health ", "Work", "Goals"]

    assert split_tags(join_tags(tags)) == ["Work", "Health", "Work", "Goals"]


def test_split_tags_drops_empty_items() -> None:
    assert split_tags(" a, ,b,,") == ["a", "b"]
    assert split_tags(None) == []
    assert split_tags("   ") == []


def test_count_words() -> None:
    assert count_words("  one\ttwo\nthree  ") == 3
    assert count_words("") == 0


def test_entry_schema_normalizes_tags() -> None:
    payload = JournalEntryCreate(primary_mood=" Calm ", tags=[" Work", "", "Health "])

    assert payload.primary_mood == "Calm"
    assert payload.tags == ["Work", "Health"]


def test_entry_schema_rejects_separator_in_tag() -> None:
    with pytest.raises(ValidationError):
        JournalEntryCreate(primary_mood="Calm", tags=["a,b"])


def test_entry_schema_requires_mood() -> None:
    with pytest.raises(ValidationError):
        JournalEntryCreate(primary_mood="   ")


@pytest.mark.parametrize("value", ["24:00", "7:30", "12:60"])
def test_clock_times_share_one_format(value: str) -> None:
    with pytest.raises(ValidationError):
        JournalEntryCreate(primary_mood="Calm", wake_up_time=value)
    with pytest.raises(ValidationError):
        JournalEntryUpdate(sleep_time=value)
    with pytest.raises(ValidationError):
        UserSettingsUpdate(notification_time=value)

    assert UserSettingsUpdate(notification_time="23:59").notification_time == "23:59"


def test_entry_update_keeps_only_supplied_fields() -> None:
    update = JournalEntryUpdate.model_validate(
        {"primary_mood": " Sad ", "entry_date": None, "secondary_mood1": None}
    )

    assert update.changes() == {"primary_mood": "Sad", "secondary_mood1": None}
    with pytest.raises(ValidationError):
        JournalEntryUpdate(primary_mood="  ")
