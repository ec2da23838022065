"""
Diagnostic log sink: appends LogEntry rows and mirrors them to `logging`.

record(db, level, message, context, fid)  → LogEntry   (commits)
record_failure(db, message, exc, context, fid)          (rollback first)
guarded(db, message, context, fid)                      context manager for routes

The rows are never read back by the application.
"""
from __future__ import annotations

import json
import logging
import traceback
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy.orm import Session

from meowpair.core.config import settings
from meowpair.core.errors import AppException, StoreError
from meowpair.models.log_entry import LogEntry, LogLevel

logger = logging.getLogger(__name__)

_PY_LEVELS = {
    LogLevel.info: logging.INFO,
    LogLevel.warn: logging.WARNING,
    LogLevel.error: logging.ERROR,
}


def record(
    db: Session,
    level: LogLevel | str,
    message: str,
    context: Optional[dict[str, Any]] = None,
    fid: Optional[int] = None,
) -> LogEntry:
    lvl = LogLevel(level)
    logger.log(_PY_LEVELS[lvl], "%s fid=%s context=%s", message, fid, context or {})
    entry = LogEntry(
        level=lvl,
        message=message[:512],
        context=json.dumps(context, default=str) if context else None,
        fid=fid,
    )
    db.add(entry)
    db.commit()
    return entry


def record_failure(
    db: Session,
    message: str,
    exc: BaseException,
    context: Optional[dict[str, Any]] = None,
    fid: Optional[int] = None,
) -> None:
    """
    Roll back the failed unit of work and write an `error` entry for it.
    If the sink itself fails, that is logged and the caller's error wins.
    """
    db.rollback()
    payload = dict(context or {})
    payload["error"] = repr(exc)
    payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        record(db, LogLevel.error, message, payload, fid)
    except Exception:
        db.rollback()
        logger.exception("Failed to write diagnostic log entry for %r", message)


@contextmanager
def guarded(
    db: Session,
    message: str,
    context: Optional[dict[str, Any]] = None,
    fid: Optional[int] = None,
) -> Iterator[None]:
    """
    Wrap a mutating unit of work.

    AppExceptions pass through (server-side ones are recorded first).
    Anything else is recorded and re-raised as StoreError; the underlying
    error text is only exposed in development.
    """
    try:
        yield
    except AppException as exc:
        if exc.http_status >= 500:
            record_failure(db, message, exc, context, fid)
        raise
    except Exception as exc:
        record_failure(db, message, exc, context, fid)
        raise StoreError(detail=str(exc) if settings.is_development else None) from exc
