"""
Session Manager: creates a cat session together with its seed stats and
looks sessions up by id or by member.

Public API
----------
create_session(db, owner_id, partner_id, name) → CatSession  (one commit)
get_session(db, session_id)                    → CatSession
get_member_session(db, session_id, fid)        → CatSession  (404 for non-members)
list_sessions_for_user(db, user_id)            → list[CatSession]
recent_activities(db, session_id, limit)       → list[Activity]
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from meowpair.core.errors import NotFoundError
from meowpair.models.activity import Activity
from meowpair.models.cat_session import CatSession, DEFAULT_SESSION_NAME
from meowpair.models.cat_stats import CatStats
from meowpair.models.user import User
from meowpair.services.stat_engine import SEED_STATS

logger = logging.getLogger(__name__)

SESSION_DETAIL_ACTIVITIES = 10
SESSION_LIST_ACTIVITIES = 5


def _require_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def seed_stats(session_id: int) -> CatStats:
    return CatStats(session_id=session_id, **SEED_STATS.as_dict())


def create_session(
    db: Session,
    owner_id: int,
    partner_id: Optional[int] = None,
    name: Optional[str] = None,
) -> CatSession:
    """
    Insert the session and its seed stats, then commit once so a session is
    never visible without stats.
    """
    _require_user(db, owner_id)
    if partner_id is not None:
        _require_user(db, partner_id)

    session = CatSession(
        owner_id=owner_id,
        partner_id=partner_id,
        name=name or DEFAULT_SESSION_NAME,
    )
    db.add(session)
    db.flush()  # get session.id before the stats row

    db.add(seed_stats(session.id))
    db.commit()
    db.refresh(session)
    logger.info("Created cat session %s owner=%s partner=%s", session.id, owner_id, partner_id)
    return session


def get_session(db: Session, session_id: int) -> CatSession:
    session = (
        db.query(CatSession)
        .options(selectinload(CatSession.stats))
        .filter(CatSession.id == session_id)
        .first()
    )
    if session is None:
        raise NotFoundError("CatSession", session_id)
    return session


def is_member(session: CatSession, fid: int) -> bool:
    members = {session.owner.fid, session.partner.fid if session.partner else None}
    return fid in members


def get_member_session(db: Session, session_id: int, fid: int) -> CatSession:
    """Like get_session, but a session the caller is not in does not exist."""
    session = get_session(db, session_id)
    if not is_member(session, fid):
        raise NotFoundError("CatSession", session_id)
    return session


def list_sessions_for_user(db: Session, user_id: int) -> list[CatSession]:
    """Sessions where the user is owner or partner, newest first."""
    return (
        db.query(CatSession)
        .options(selectinload(CatSession.stats))
        .filter(or_(CatSession.owner_id == user_id, CatSession.partner_id == user_id))
        .order_by(CatSession.created_at.desc(), CatSession.id.desc())
        .all()
    )


def recent_activities(db: Session, session_id: int, limit: int) -> list[Activity]:
    """Newest-first activities; id breaks ties between equal timestamps."""
    return (
        db.query(Activity)
        .filter(Activity.session_id == session_id)
        .order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(limit)
        .all()
    )
