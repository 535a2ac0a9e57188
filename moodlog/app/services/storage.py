from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Collection, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.errors import InvalidArgument, NotFound, StorageUnavailable
from ..core.moods import category_of
from ..core.tags import count_words, join_tags
from ..db.models import JournalEntry, SettingEntry
from ..insights.filters import filter_entries
from ..schemas.journal import JournalEntryCreate, JournalEntryUpdate
from ..schemas.settings import (
    USER_SETTINGS_PREFIX,
    UserSettings,
    UserSettingsUpdate,
    settings_key,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from moodlog.db import StoreInitializer

logger = logging.getLogger(__name__)


class StorageService:
    """Persist journal entries and user settings."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        initializer: StoreInitializer | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._initializer = initializer

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._initializer is not None:
            await self._initializer.ensure_ready()
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Journal store query failed", exc_info=True)
            raise StorageUnavailable("journal store unavailable") from exc

    @staticmethod
    def _check_id(entry_id: int) -> None:
        if entry_id <= 0:
            raise InvalidArgument(f"entry id must be positive, got {entry_id}")

    async def healthcheck(self) -> None:
        async with self._session() as session:
            await session.execute(text("SELECT 1"))

    # -- settings helpers ------------------------------------------------
    async def get_setting(self, key: str) -> str | None:
        async with self._session() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            return entry.value if entry else None

    async def set_setting(self, key: str, value: str) -> None:
        async with self._session() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key == key)
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                entry = SettingEntry(key=key, value=value)
                session.add(entry)
            else:
                entry.value = value
            await session.commit()

    async def get_user_settings(self) -> UserSettings:
        async with self._session() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key.startswith(USER_SETTINGS_PREFIX))
            )
            rows = list(result.scalars().all())

        values: dict[str, object] = {}
        for row in rows:
            field = row.key[len(USER_SETTINGS_PREFIX):]
            if field not in UserSettings.model_fields:
                continue
            try:
                values[field] = json.loads(row.value)
            except json.JSONDecodeError:
                logger.warning("Ignoring unreadable setting %s", row.key)

        try:
            return UserSettings.model_validate(values)
        except ValidationError as exc:
            invalid = {error["loc"][0] for error in exc.errors() if error["loc"]}
            logger.warning("Falling back to defaults for settings: %s", sorted(map(str, invalid)))
            cleaned = {key: value for key, value in values.items() if key not in invalid}
            return UserSettings.model_validate(cleaned)

    async def update_user_settings(self, patch: UserSettingsUpdate) -> UserSettings:
        current = await self.get_user_settings()
        merged = UserSettings.model_validate(
            {**current.model_dump(), **patch.model_dump(exclude_none=True)}
        )
        async with self._session() as session:
            result = await session.execute(
                select(SettingEntry).where(SettingEntry.key.startswith(USER_SETTINGS_PREFIX))
            )
            existing = {row.key: row for row in result.scalars().all()}
            for field, value in merged.model_dump().items():
                key = settings_key(field)
                encoded = json.dumps(value)
                row = existing.get(key)
                if row is None:
                    session.add(SettingEntry(key=key, value=encoded))
                else:
                    row.value = encoded
            await session.commit()
        return merged

    # -- journal entries -------------------------------------------------
    @staticmethod
    def _apply(entry: JournalEntry, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            if name == "tags":
                entry.all_moods = join_tags(value)
            else:
                setattr(entry, name, value)
        # Derived columns are recomputed on every write.
        entry.category = category_of(entry.primary_mood)
        entry.word_count = count_words(entry.content)

    async def list_entries(self) -> list[JournalEntry]:
        async with self._session() as session:
            result = await session.execute(
                select(JournalEntry).order_by(
                    JournalEntry.entry_date.desc(),
                    JournalEntry.id.desc(),
                )
            )
            return list(result.scalars().all())

    async def list_entries_between(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[JournalEntry]:
        query = select(JournalEntry)
        if start is not None:
            query = query.where(JournalEntry.entry_date >= start)
        if end is not None:
            query = query.where(JournalEntry.entry_date <= end)
        query = query.order_by(JournalEntry.entry_date.desc(), JournalEntry.id.desc())
        async with self._session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def get_entry(self, entry_id: int) -> JournalEntry | None:
        self._check_id(entry_id)
        async with self._session() as session:
            return await session.get(JournalEntry, entry_id)

    async def get_entry_by_date(self, day: date) -> JournalEntry | None:
        async with self._session() as session:
            result = await session.execute(
                select(JournalEntry)
                .where(JournalEntry.entry_date == day)
                .order_by(JournalEntry.id.asc())
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def has_entry_for_date(self, day: date) -> bool:
        return await self.get_entry_by_date(day) is not None

    async def create_entry(self, data: JournalEntryCreate) -> JournalEntry:
        async with self._session() as session:
            now = datetime.now()
            entry = JournalEntry(created_at=now, updated_at=now)
            self._apply(entry, data.model_dump())
            session.add(entry)
            await session.commit()
            await session.refresh(entry)
        logger.info("Journal entry created", extra={"entry_id": entry.id})
        return entry

    async def update_entry(
        self,
        entry_id: int,
        data: JournalEntryCreate | JournalEntryUpdate,
    ) -> JournalEntry:
        """Replace the entry with a full payload, or patch it with the supplied fields."""

        self._check_id(entry_id)
        if isinstance(data, JournalEntryUpdate):
            values = data.changes()
        else:
            values = data.model_dump()
        async with self._session() as session:
            entry = await session.get(JournalEntry, entry_id)
            if entry is None:
                raise NotFound(f"journal entry {entry_id} not found")
            self._apply(entry, values)
            entry.updated_at = datetime.now()
            await session.commit()
            await session.refresh(entry)
        logger.info("Journal entry updated", extra={"entry_id": entry_id})
        return entry

    async def upsert_entry(self, data: JournalEntryCreate, entry_id: int | None = None) -> int:
        if not entry_id:
            entry = await self.create_entry(data)
        else:
            entry = await self.update_entry(entry_id, data)
        return entry.id

    async def delete_entry(self, entry_id: int) -> bool:
        self._check_id(entry_id)
        async with self._session() as session:
            entry = await session.get(JournalEntry, entry_id)
            if entry is None:
                return False
            await session.delete(entry)
            await session.commit()
        logger.info("Journal entry deleted", extra={"entry_id": entry_id})
        return True

    async def filter_entries(
        self,
        *,
        start: date | None = None,
        end: date | None = None,
        moods: Collection[str] | None = None,
        tags: Collection[str] | None = None,
        query: str | None = None,
    ) -> Sequence[JournalEntry]:
        entries = await self.list_entries_between(start, end)
        return filter_entries(entries, moods=moods, tags=tags, query=query)


__all__ = ["StorageService"]
