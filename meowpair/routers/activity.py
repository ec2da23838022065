"""
Activity router.

POST /activity   — feed / cuddle / love a cat
GET  /activity   — latest activities of a session
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from meowpair.core.security import get_current_fid
from meowpair.db.base import get_db
from meowpair.models.log_entry import LogLevel
from meowpair.routers._serializers import activity_to_out, stats_to_out
from meowpair.schemas.activity import (
    ActivityListResponse,
    LogActivityRequest,
    LogActivityResponse,
)
from meowpair.schemas.common import ErrorResponse
from meowpair.services import log_sink
from meowpair.services.activity import MAX_LIST_LIMIT, list_activities, log_activity
from meowpair.services.identity import resolve_caller
from meowpair.services.sessions import create_session, get_member_session

router = APIRouter(
    prefix="/activity",
    tags=["activity"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid bearer credentials"}},
)

QUICK_SESSION_NAME = "Quick Cat Session"


@router.post(
    "",
    response_model=LogActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an action on a cat",
    responses={
        400: {"description": "Unknown action or malformed body"},
        401: {"description": "Missing or invalid bearer credentials"},
        404: {"description": "Session not found, or caller is not a member"},
        500: {"description": "Persistence error"},
    },
)
def post_activity(
    payload: LogActivityRequest,
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    """
    Record `action` for the caller and return the updated cat stats.

    | action | love | hunger | happiness |
    |---|---|---|---|
    | `feed`   | +0  | +20 | +5  |
    | `cuddle` | +10 | +0  | +15 |
    | `love`   | +15 | +0  | +10 |

    Stats cap at 100. Without `session_id` a new quick session owned by the
    caller is created first.
    """
    if payload.session_id is not None:
        get_member_session(db, payload.session_id, fid)

    context = {
        "session_id": payload.session_id,
        "action": payload.action,
        "wallet_address": payload.wallet_address,
    }
    log_sink.record(db, LogLevel.info, "Activity log request received", context, fid)

    with log_sink.guarded(db, "Error logging activity", context, fid):
        user = resolve_caller(db, fid, address=payload.wallet_address)
        session_id = payload.session_id
        if session_id is None:
            session_id = create_session(db, owner_id=user.id, name=QUICK_SESSION_NAME).id
        result = log_activity(db, session_id, user.id, payload.action)

    log_sink.record(
        db, LogLevel.info, "Activity logged successfully",
        {"activity_id": result.activity.id, "session_id": session_id},
        fid,
    )
    return LogActivityResponse(
        activity=activity_to_out(result.activity),
        stats=stats_to_out(result.stats),
        session_id=session_id,
    )


@router.get(
    "",
    response_model=ActivityListResponse,
    summary="List a session's activities (newest first)",
    responses={404: {"description": "Session not found, or caller is not a member"}},
)
def get_activities(
    session_id: int = Query(description="Session to read.", gt=0),
    limit: int = Query(default=10, ge=1, le=MAX_LIST_LIMIT, description="Page size."),
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    get_member_session(db, session_id, fid)
    activities = list_activities(db, session_id, limit)
    return ActivityListResponse(activities=[activity_to_out(a) for a in activities])
