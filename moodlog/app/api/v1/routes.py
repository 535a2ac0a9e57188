from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status
from fastapi.responses import StreamingResponse

from ...core.errors import InvalidArgument, NotFound
from ...core.moods import ALL_MOODS, MOOD_CATEGORIES, SUGGESTED_TAGS, emoji_for
from ...db.models import JournalEntry
from ...metrics import API_COUNTER, ENTRY_WRITES, EXPORTS
from ...schemas.analytics import (
    AnalyticsData,
    MoodCatalog,
    MoodStreakResponse,
    StreakInfo,
    TagUsageResponse,
)
from ...schemas.journal import (
    CalendarDay,
    CalendarResponse,
    ExportResponse,
    JournalCreateResponse,
    JournalEntryCreate,
    JournalEntryModel,
    JournalEntryUpdate,
    JournalListResponse,
)
from ...schemas.settings import UserSettings, UserSettingsUpdate
from ...services.journal import JournalService
from ...services.storage import StorageService

router = APIRouter(prefix="/api/v1", tags=["journal"])


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_journal_service(request: Request) -> JournalService:
    return request.app.state.journal_service


def _to_model(entry: JournalEntry) -> JournalEntryModel:
    return JournalEntryModel.model_validate(entry, from_attributes=True)


def _to_list(entries: list[JournalEntry]) -> JournalListResponse:
    return JournalListResponse(items=[_to_model(entry) for entry in entries])


def _http_error(exc: NotFound | InvalidArgument) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# -- entries -----------------------------------------------------------------
@router.get("/entries", response_model=JournalListResponse)
async def list_entries(
    storage: StorageService = Depends(get_storage_service),
    limit: int | None = Query(default=None, ge=1, le=1000),
) -> JournalListResponse:
    entries = await storage.list_entries()
    if limit is not None:
        entries = entries[:limit]
    API_COUNTER.labels(endpoint="entries_list").inc()
    return _to_list(entries)


@router.post(
    "/entries",
    response_model=JournalCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_entry(
    payload: JournalEntryCreate,
    storage: StorageService = Depends(get_storage_service),
) -> JournalCreateResponse:
    entry = await storage.create_entry(payload)
    ENTRY_WRITES.labels(operation="create").inc()
    API_COUNTER.labels(endpoint="entries_create").inc()
    return JournalCreateResponse(id=entry.id)


@router.get("/entries/search", response_model=JournalListResponse)
async def search_entries(
    journal: JournalService = Depends(get_journal_service),
    q: str = Query(default=""),
) -> JournalListResponse:
    entries = await journal.search(q)
    API_COUNTER.labels(endpoint="entries_search").inc()
    return _to_list(entries)


@router.get("/entries/filter", response_model=JournalListResponse)
async def filter_entries(
    journal: JournalService = Depends(get_journal_service),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    moods: list[str] | None = Query(default=None),
    tags: list[str] | None = Query(default=None),
    q: str | None = Query(default=None),
) -> JournalListResponse:
    entries = await journal.filter(start=start, end=end, moods=moods, tags=tags, query=q)
    API_COUNTER.labels(endpoint="entries_filter").inc()
    return _to_list(entries)


@router.get("/entries/by-date/{day}", response_model=JournalEntryModel)
async def read_entry_by_date(
    day: date,
    storage: StorageService = Depends(get_storage_service),
) -> JournalEntryModel:
    entry = await storage.get_entry_by_date(day)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no entry for date")
    return _to_model(entry)


@router.get("/entries/{entry_id}", response_model=JournalEntryModel)
async def read_entry(
    entry_id: int,
    storage: StorageService = Depends(get_storage_service),
) -> JournalEntryModel:
    try:
        entry = await storage.get_entry(entry_id)
    except InvalidArgument as exc:
        raise _http_error(exc) from exc
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="entry not found")
    return _to_model(entry)


@router.put("/entries/{entry_id}", response_model=JournalEntryModel)
async def update_entry(
    entry_id: int,
    payload: JournalEntryUpdate,
    storage: StorageService = Depends(get_storage_service),
) -> JournalEntryModel:
    try:
        entry = await storage.update_entry(entry_id, payload)
    except (InvalidArgument, NotFound) as exc:
        raise _http_error(exc) from exc
    ENTRY_WRITES.labels(operation="update").inc()
    API_COUNTER.labels(endpoint="entries_update").inc()
    return _to_model(entry)


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: int,
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    try:
        deleted = await storage.delete_entry(entry_id)
    except InvalidArgument as exc:
        raise _http_error(exc) from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="entry not found")
    ENTRY_WRITES.labels(operation="delete").inc()
    API_COUNTER.labels(endpoint="entries_delete").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- export ------------------------------------------------------------------
@router.get("/entries/{entry_id}/export/pdf")
async def export_entry_pdf(
    entry_id: int,
    journal: JournalService = Depends(get_journal_service),
) -> StreamingResponse:
    try:
        filename, payload = await journal.export_pdf(entry_id)
    except (InvalidArgument, NotFound) as exc:
        raise _http_error(exc) from exc
    EXPORTS.labels(format="pdf").inc()
    return StreamingResponse(
        iter([payload]),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/entries/{entry_id}/export/pdf", response_model=ExportResponse)
async def save_entry_pdf(
    entry_id: int,
    journal: JournalService = Depends(get_journal_service),
) -> ExportResponse:
    try:
        path = await journal.save_pdf(entry_id)
    except (InvalidArgument, NotFound) as exc:
        raise _http_error(exc) from exc
    EXPORTS.labels(format="pdf").inc()
    return ExportResponse(path=str(path))


@router.get("/export/markdown")
async def export_markdown(
    journal: JournalService = Depends(get_journal_service),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> StreamingResponse:
    content = await journal.export_markdown(start, end)
    EXPORTS.labels(format="markdown").inc()
    return StreamingResponse(
        iter([content.encode("utf-8")]),
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=journal.md"},
    )


@router.post("/export/markdown", response_model=ExportResponse)
async def save_markdown(
    journal: JournalService = Depends(get_journal_service),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> ExportResponse:
    path = await journal.save_markdown(start, end)
    EXPORTS.labels(format="markdown").inc()
    return ExportResponse(path=str(path))


# -- calendar and analytics --------------------------------------------------
@router.get("/calendar/{year}/{month}", response_model=CalendarResponse)
async def read_calendar(
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    journal: JournalService = Depends(get_journal_service),
) -> CalendarResponse:
    days = await journal.calendar(year, month)
    return CalendarResponse(
        year=year,
        month=month,
        days=[CalendarDay(day=day, entry=_to_model(entry)) for day, entry in days.items()],
    )


@router.get("/analytics", response_model=AnalyticsData)
async def read_analytics(
    journal: JournalService = Depends(get_journal_service),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    tag_limit: int | None = Query(default=None, ge=1),
) -> AnalyticsData:
    data = await journal.analytics(start, end, tag_limit=tag_limit)
    API_COUNTER.labels(endpoint="analytics").inc()
    return data


@router.get("/streaks", response_model=StreakInfo)
async def read_streaks(journal: JournalService = Depends(get_journal_service)) -> StreakInfo:
    info = await journal.streaks()
    API_COUNTER.labels(endpoint="streaks").inc()
    return info


@router.get("/moods", response_model=MoodCatalog)
async def read_moods() -> MoodCatalog:
    return MoodCatalog(
        moods=list(ALL_MOODS),
        categories={name: list(moods) for name, moods in MOOD_CATEGORIES.items()},
        suggested_tags=list(SUGGESTED_TAGS),
        emoji={mood: emoji_for(mood) for mood in ALL_MOODS},
    )


@router.get("/moods/{mood}/streak", response_model=MoodStreakResponse)
async def read_mood_streak(
    mood: str,
    journal: JournalService = Depends(get_journal_service),
) -> MoodStreakResponse:
    return MoodStreakResponse(mood=mood, streak=await journal.mood_streak(mood))


@router.get("/tags/{tag}/count", response_model=TagUsageResponse)
async def read_tag_usage(
    tag: str,
    journal: JournalService = Depends(get_journal_service),
) -> TagUsageResponse:
    return TagUsageResponse(tag=tag, count=await journal.tag_usage(tag))


# -- settings ----------------------------------------------------------------
@router.get("/settings", response_model=UserSettings)
async def read_settings(storage: StorageService = Depends(get_storage_service)) -> UserSettings:
    return await storage.get_user_settings()


@router.put("/settings", response_model=UserSettings)
async def update_settings(
    payload: UserSettingsUpdate,
    storage: StorageService = Depends(get_storage_service),
) -> UserSettings:
    settings = await storage.update_user_settings(payload)
    API_COUNTER.labels(endpoint="settings_update").inc()
    return settings
