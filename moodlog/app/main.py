from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from moodlog.db import StoreInitializer, create_engine, create_session_factory

from .api.v1.routes import router as v1_router
from .core.config import Settings, get_settings
from .core.errors import IOFailure, StorageUnavailable
from .core.logging import configure_logging
from .middleware import RequestLoggingMiddleware
from .services.journal import JournalService
from .services.storage import StorageService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store and services on startup and dispose the engine on shutdown."""

    configure_logging()
    settings: Settings = get_settings()

    engine = create_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    initializer = StoreInitializer(engine, session_factory, settings.version)
    storage_service = StorageService(session_factory, initializer)
    journal_service = JournalService(storage_service, settings=settings)

    app.state.settings = settings
    app.state.db_engine = engine
    app.state.db_session_factory = session_factory
    app.state.store_initializer = initializer
    app.state.storage_service = storage_service
    app.state.journal_service = journal_service

    logger.info("Starting moodlog %s", settings.version)
    try:
        await initializer.ensure_ready()
    except StorageUnavailable:
        logger.warning("Store not ready at startup, will retry on first request", exc_info=True)

    try:
        yield
    finally:
        await app.state.db_engine.dispose()


app = FastAPI(title="moodlog", version=get_settings().version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(v1_router)


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


@app.exception_handler(IOFailure)
async def io_failure_handler(request: Request, exc: IOFailure) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


@app.get("/healthz")
async def healthz(request: Request, settings: Settings = Depends(get_settings)) -> dict[str, str]:
    initializer: StoreInitializer = request.app.state.store_initializer
    return {
        "status": "ok",
        "store": initializer.state.value,
        "version": settings.version,
    }


@app.get("/readyz")
async def readyz(request: Request) -> dict[str, Any]:
    storage: StorageService = request.app.state.storage_service

    db_ok = True
    db_detail = "ok"
    try:
        await storage.healthcheck()
    except StorageUnavailable as exc:
        db_ok = False
        db_detail = str(exc)

    return {
        "ready": db_ok,
        "db": {"ok": db_ok, "detail": db_detail},
    }


@app.get("/metrics")
async def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
