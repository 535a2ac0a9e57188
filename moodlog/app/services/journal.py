from __future__ import annotations

from collections.abc import Callable, Collection
from datetime import date, datetime
from pathlib import Path

from ..core.config import Settings
from ..core.errors import NotFound
from ..db.models import JournalEntry
from ..insights import (
    compute_analytics,
    compute_streak_info,
    entries_by_month,
    mood_streak,
    search_entries,
    tag_usage_count,
)
from ..schemas.analytics import AnalyticsData, StreakInfo
from .export import pdf_filename, render_markdown, render_pdf, write_markdown, write_pdf
from .storage import StorageService


class JournalService:
    """Feeds store snapshots through the analytics, streak and filter engines."""

    def __init__(
        self,
        storage: StorageService,
        *,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings
        self._clock = clock or datetime.now

    def today(self) -> date:
        return self._clock().date()

    async def analytics(
        self,
        start: date | None = None,
        end: date | None = None,
        *,
        tag_limit: int | None = None,
    ) -> AnalyticsData:
        entries = await self._storage.list_entries_between(start, end)
        return compute_analytics(
            entries,
            today=self.today(),
            tag_limit=tag_limit or self._settings.tag_display_limit,
        )

    async def streaks(self) -> StreakInfo:
        entries = await self._storage.list_entries()
        return compute_streak_info(
            entries,
            today=self.today(),
            window_days=self._settings.missed_days_window,
        )

    async def filter(
        self,
        *,
        start: date | None = None,
        end: date | None = None,
        moods: Collection[str] | None = None,
        tags: Collection[str] | None = None,
        query: str | None = None,
    ) -> list[JournalEntry]:
        return list(
            await self._storage.filter_entries(
                start=start,
                end=end,
                moods=moods,
                tags=tags,
                query=query,
            )
        )

    async def search(self, query: str | None) -> list[JournalEntry]:
        entries = await self._storage.list_entries()
        return search_entries(entries, query)

    async def calendar(self, year: int, month: int) -> dict[date, JournalEntry]:
        entries = await self._storage.list_entries()
        return entries_by_month(list(reversed(entries)), year, month)

    async def mood_streak(self, mood: str) -> int:
        entries = await self._storage.list_entries()
        return mood_streak(entries, mood, today=self.today())

    async def tag_usage(self, tag: str) -> int:
        entries = await self._storage.list_entries()
        return tag_usage_count(entries, tag)

    async def _require_entry(self, entry_id: int) -> JournalEntry:
        entry = await self._storage.get_entry(entry_id)
        if entry is None:
            raise NotFound(f"journal entry {entry_id} not found")
        return entry

    async def export_markdown(self, start: date | None = None, end: date | None = None) -> str:
        entries = await self._storage.list_entries_between(start, end)
        return render_markdown(entries)

    async def save_markdown(self, start: date | None = None, end: date | None = None) -> Path:
        entries = await self._storage.list_entries_between(start, end)
        filename = f"journal_{self._clock():%Y%m%d_%H%M%S}.md"
        return write_markdown(entries, self._settings.export_dir / filename)

    async def export_pdf(self, entry_id: int) -> tuple[str, bytes]:
        entry = await self._require_entry(entry_id)
        payload = render_pdf(entry, self._settings.pdf_font_path)
        return pdf_filename(entry, self._clock()), payload

    async def save_pdf(self, entry_id: int) -> Path:
        entry = await self._require_entry(entry_id)
        return write_pdf(
            entry,
            self._settings.export_dir,
            font_path=self._settings.pdf_font_path,
            now=self._clock(),
        )


__all__ = ["JournalService"]
