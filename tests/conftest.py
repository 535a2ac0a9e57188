from __future__ import annotations

from collections.abc import Callable, Generator, Iterable
from datetime import date
from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from moodlog.app.core import config
from moodlog.db import StoreInitializer, create_engine, create_session_factory, init_db


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def make_entry() -> Callable[..., SimpleNamespace]:
    """Build lightweight entry snapshots for the pure engines."""

    def _make(
        day: date,
        mood: str = "Happy",
        tags: Iterable[str] = (),
        content: str = "",
        title: str = "",
    ) -> SimpleNamespace:
        return SimpleNamespace(
            entry_date=day,
            title=title,
            content=content,
            primary_mood=mood,
            tags=list(tags),
            word_count=len(content.split()),
        )

    return _make


@pytest.fixture()
def test_client(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> Generator[TestClient, None, None]:
    monkeypatch.setenv("VERSION", "0.1.0-test")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "moodlog.log"))
    monkeypatch.delenv("PDF_FONT_PATH", raising=False)
    config.get_settings.cache_clear()

    from moodlog.app.main import app

    try:
        with TestClient(app) as client:
            yield client
    finally:
        config.get_settings.cache_clear()


@pytest.fixture()
async def temp_session_factory(tmp_path: Path):
    db_path = tmp_path / f"unit_{uuid4().hex}.db"
    engine = create_engine(f"sqlite+aiosqlite:///{db_path}")
    session_factory = create_session_factory(engine)
    await init_db(engine, session_factory, "test")
    try:
        yield session_factory
    finally:
        await engine.dispose()


@pytest.fixture()
async def storage(tmp_path: Path):
    from moodlog.app.services.storage import StorageService

    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    session_factory = create_session_factory(engine)
    initializer = StoreInitializer(engine, session_factory, "test")
    try:
        yield StorageService(session_factory, initializer)
    finally:
        await engine.dispose()
