"""
Cat session router.

POST /cat-session         — create a session (owner = caller, optional partner)
GET  /cat-session         — caller's sessions, newest first
GET  /cat-session/{id}    — one session the caller belongs to
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from meowpair.core.errors import NotFoundError, ValidationError
from meowpair.core.security import get_current_fid
from meowpair.db.base import get_db
from meowpair.models.log_entry import LogLevel
from meowpair.routers._serializers import session_to_out
from meowpair.schemas.cat_session import (
    CatSessionListResponse,
    CatSessionResponse,
    CreateCatSessionRequest,
)
from meowpair.schemas.common import ErrorResponse
from meowpair.services import log_sink
from meowpair.services.identity import get_user_by_fid, resolve_caller, resolve_or_create_user
from meowpair.services.sessions import (
    SESSION_DETAIL_ACTIVITIES,
    SESSION_LIST_ACTIVITIES,
    create_session,
    get_member_session,
    list_sessions_for_user,
)

router = APIRouter(
    prefix="/cat-session",
    tags=["cat-session"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid bearer credentials"}},
)


# ---------------------------------------------------------------------------
# POST /cat-session
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=CatSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a cat session",
    responses={
        400: {"description": "Validation error (bad partner fid, self-partnering, etc.)"},
        401: {"description": "Missing or invalid bearer credentials"},
        500: {"description": "Persistence error"},
    },
)
def create_cat_session(
    payload: CreateCatSessionRequest,
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    """
    Create a cat owned by the caller, optionally shared with `partner_fid`.

    Unknown owner / partner identities are created on the fly. The new cat
    starts at love 50, hunger 30, happiness 75.
    """
    if payload.partner_fid == fid:
        raise ValidationError("A cat cannot be shared with yourself.", field="partner_fid")

    context = {"partner_fid": payload.partner_fid, "name": payload.name}
    log_sink.record(db, LogLevel.info, "Create cat session request received", context, fid)

    with log_sink.guarded(db, "Error creating cat session", context, fid):
        owner = resolve_caller(db, fid, address=payload.wallet_address)
        partner = None
        if payload.partner_fid is not None:
            partner = resolve_or_create_user(db, fid=payload.partner_fid)
            if partner.id == owner.id:
                raise ValidationError("A cat cannot be shared with yourself.", field="partner_fid")
        session = create_session(
            db,
            owner_id=owner.id,
            partner_id=partner.id if partner else None,
            name=payload.name,
        )

    log_sink.record(db, LogLevel.info, "Cat session created", {"session_id": session.id}, fid)
    return CatSessionResponse(session=session_to_out(db, session, SESSION_DETAIL_ACTIVITIES))


# ---------------------------------------------------------------------------
# GET /cat-session
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=CatSessionListResponse,
    summary="List the caller's cat sessions (newest first)",
    responses={404: {"description": "Caller has never been seen"}},
)
def list_cat_sessions(
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    """Sessions the caller owns or partners in, each with its 5 latest activities."""
    user = get_user_by_fid(db, fid)
    if user is None:
        raise NotFoundError("User", fid)
    sessions = list_sessions_for_user(db, user.id)
    return CatSessionListResponse(
        sessions=[session_to_out(db, s, SESSION_LIST_ACTIVITIES) for s in sessions]
    )


# ---------------------------------------------------------------------------
# GET /cat-session/{session_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{session_id}",
    response_model=CatSessionResponse,
    summary="Fetch one cat session",
    responses={404: {"description": "No such session, or caller is not a member"}},
)
def read_cat_session(
    session_id: int,
    fid: int = Depends(get_current_fid),
    db: Session = Depends(get_db),
):
    session = get_member_session(db, session_id, fid)
    return CatSessionResponse(session=session_to_out(db, session, SESSION_DETAIL_ACTIVITIES))
