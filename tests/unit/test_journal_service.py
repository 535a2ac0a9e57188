from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from moodlog.app.core.config import Settings
from moodlog.app.core.errors import NotFound
from moodlog.app.schemas.journal import JournalEntryCreate
from moodlog.app.services.journal import JournalService
from moodlog.app.services.storage import StorageService

NOW = datetime(2024, 6, 12, 9, 30, 0)  # a Wednesday


@pytest.fixture()
def journal(storage: StorageService, tmp_path: Path) -> JournalService:
    settings = Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        EXPORT_DIR=tmp_path / "exports",
        log_file=tmp_path / "logs" / "test.log",
        TAG_DISPLAY_LIMIT=2,
        MISSED_DAYS_WINDOW=7,
    )
    return JournalService(storage, settings=settings, clock=lambda: NOW)


async def _seed(storage: StorageService) -> None:
    rows = [
        (date(2024, 6, 12), "Happy", ["Work", "Family"], "today was good"),
        (date(2024, 6, 11), "Happy", ["Work"], "steady"),
        (date(2024, 6, 10), "Sad", ["Health"], "rough start"),
        (date(2024, 5, 20), "Calm", ["Work", "Travel"], "train ride"),
    ]
    for day, mood, tags, content in rows:
        await storage.create_entry(
            JournalEntryCreate(
                entry_date=day,
                primary_mood=mood,
                tags=tags,
                content=content,
                title=f"{mood} day",
            )
        )


@pytest.mark.anyio
async def test_analytics_uses_configured_tag_limit(journal, storage) -> None:
    await _seed(storage)

    data = await journal.analytics()

    assert data.total_entries == 4
    assert data.entries_this_week == 3
    assert data.entries_this_month == 3
    assert data.tag_frequency == {"Work": 3, "Family": 1}
    assert data.most_frequent_mood == "Work"

    bounded = await journal.analytics(date(2024, 6, 1), date(2024, 6, 30), tag_limit=5)
    assert bounded.total_entries == 3
    assert len(bounded.tag_frequency) == 3


@pytest.mark.anyio
async def test_streaks_follow_clock(journal, storage) -> None:
    await _seed(storage)

    info = await journal.streaks()

    assert info.current_streak == 3
    assert info.longest_streak == 3
    assert info.is_active_today is True
    assert info.last_entry_date == date(2024, 6, 12)
    assert info.missed_days == [date(2024, 6, 6), date(2024, 6, 7), date(2024, 6, 8), date(2024, 6, 9)]


@pytest.mark.anyio
async def test_streaks_without_entries(journal) -> None:
    info = await journal.streaks()

    assert info.current_streak == 0
    assert info.missed_days == []


@pytest.mark.anyio
async def test_search_filter_and_calendar(journal, storage) -> None:
    await _seed(storage)

    found = await journal.search("TRAIN")
    assert [entry.entry_date for entry in found] == [date(2024, 5, 20)]

    filtered = await journal.filter(start=date(2024, 6, 1), moods=["Work"])
    assert [entry.entry_date for entry in filtered] == [date(2024, 6, 12), date(2024, 6, 11)]

    days = await journal.calendar(2024, 6)
    assert list(days) == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]

    assert await journal.mood_streak("Happy") == 2
    assert await journal.tag_usage("Work") == 3


@pytest.mark.anyio
async def test_exports(journal, storage) -> None:
    await _seed(storage)
    entry = (await storage.list_entries())[0]

    markdown = await journal.export_markdown(start=date(2024, 6, 11))
    assert markdown.count("---\n") == 2

    saved = await journal.save_markdown()
    assert saved.name == "journal_20240612_093000.md"
    assert saved.exists()

    filename, payload = await journal.export_pdf(entry.id)
    assert filename == "JournalEntry_20240612_093000.pdf"
    assert payload.startswith(b"%PDF")

    pdf_path = await journal.save_pdf(entry.id)
    assert pdf_path.parent.name == "exports"
    assert pdf_path.exists()


@pytest.mark.anyio
async def test_export_missing_entry(journal) -> None:
    with pytest.raises(NotFound):
        await journal.export_pdf(42)
