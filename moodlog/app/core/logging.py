"""JSON log records on the root logger, written to a rotating file and stderr."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import Any

from .config import Settings, get_settings

# Attributes lifted from ``extra=`` onto the top level of the payload.
RECORD_FIELDS = (
    "request_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "entry_id",
)

# Driver loggers that are chatty at INFO.
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "fontTools", "fpdf")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; values that are not JSON types are stringified."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in RECORD_FIELDS
            if getattr(record, name, None) is not None
        )

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            payload.update(extra_fields)

        if record.exc_info:
            payload["exc_type"] = getattr(record.exc_info[0], "__name__", None)
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(settings: Settings | None = None) -> None:
    """Install the JSON handlers once; later calls leave the root logger alone."""

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    settings = settings or get_settings()
    formatter = JsonFormatter()

    file_handler = RotatingFileHandler(
        settings.log_file,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
