from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path

from sqlalchemy import event, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from moodlog.app.core.errors import StorageUnavailable
from moodlog.app.db.models import Base, SettingEntry
from moodlog.app.schemas.settings import UserSettings, settings_key

logger = logging.getLogger(__name__)

DEFAULT_SQLITE_URL = "sqlite:///./data/moodlog.db"
SCHEMA_VERSION_KEY = "schema_version"


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(
        dbapi_connection,
        connection_record,
    ) -> None:  # pragma: no cover - event hook
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _ensure_sqlite_path(url: str) -> None:
    if "///" not in url:
        return
    path_part = url.split("///", maxsplit=1)[-1]
    if path_part in {"", ":memory:"}:
        return
    Path(path_part).parent.mkdir(parents=True, exist_ok=True)


def normalize_database_url(raw_url: str | None) -> str:
    if not raw_url:
        raw_url = DEFAULT_SQLITE_URL

    url = str(raw_url)
    if url.startswith("sqlite://") and "+aiosqlite" not in url:
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    if url.startswith("sqlite+aiosqlite:///"):
        _ensure_sqlite_path(url)

    return url


def create_engine(database_url: str | None) -> AsyncEngine:
    normalized = normalize_database_url(database_url)
    engine = create_async_engine(normalized, echo=False)
    if normalized.startswith("sqlite"):
        _enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(
    engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
    version: str,
) -> None:
    """Create tables, record the schema version and seed default user settings."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    defaults = UserSettings().model_dump()
    async with session_factory() as session:
        result = await session.execute(select(SettingEntry))
        existing = {entry.key: entry for entry in result.scalars().all()}

        version_entry = existing.get(SCHEMA_VERSION_KEY)
        if version_entry is None:
            session.add(SettingEntry(key=SCHEMA_VERSION_KEY, value=version))
        else:
            version_entry.value = version

        for field, value in defaults.items():
            key = settings_key(field)
            if key not in existing:
                session.add(SettingEntry(key=key, value=json.dumps(value)))
        await session.commit()


class InitState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


InitFunc = Callable[[AsyncEngine, async_sessionmaker[AsyncSession], str], Awaitable[None]]


class StoreInitializer:
    """Runs store setup at most once; concurrent callers wait for it to finish."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
        version: str,
        *,
        init: InitFunc = init_db,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory
        self._version = version
        self._init = init
        self._state = InitState.UNINITIALIZED
        self._lock = asyncio.Lock()

    @property
    def state(self) -> InitState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state == InitState.READY

    async def ensure_ready(self) -> None:
        if self._state == InitState.READY:
            return
        async with self._lock:
            if self._state == InitState.READY:
                return
            self._state = InitState.INITIALIZING
            logger.info(
                "Initializing journal store",
                extra={"extra_fields": {"version": self._version}},
            )
            try:
                await self._init(self._engine, self._session_factory, self._version)
            except (SQLAlchemyError, OSError) as exc:
                self._state = InitState.UNINITIALIZED
                logger.error("Journal store initialization failed", exc_info=True)
                raise StorageUnavailable("journal store initialization failed") from exc
            self._state = InitState.READY
            logger.info("Journal store ready")


__all__ = [
    "InitState",
    "StoreInitializer",
    "create_engine",
    "create_session_factory",
    "init_db",
    "normalize_database_url",
]
