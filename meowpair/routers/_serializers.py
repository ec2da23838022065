"""
ORM → response schema conversion shared by the routers.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from meowpair.models.activity import Activity
from meowpair.models.cat_session import CatSession
from meowpair.models.cat_stats import CatStats
from meowpair.models.user import User
from meowpair.schemas.cat_session import ActivityOut, CatSessionOut, CatStatsOut
from meowpair.schemas.common import UserOut
from meowpair.services.sessions import recent_activities


def _ev(v) -> str:
    """Extract bare string value from a str-enum or plain str."""
    return v.value if hasattr(v, "value") else str(v)


def user_to_out(user: Optional[User]) -> Optional[UserOut]:
    if user is None:
        return None
    return UserOut.model_validate(user)


def stats_to_out(stats: Optional[CatStats]) -> Optional[CatStatsOut]:
    if stats is None:
        return None
    return CatStatsOut(love=stats.love, hunger=stats.hunger, happiness=stats.happiness)


def activity_to_out(activity: Activity) -> ActivityOut:
    return ActivityOut(
        id=activity.id,
        session_id=activity.session_id,
        action=_ev(activity.action),
        created_at=activity.created_at.isoformat() if activity.created_at else "",
        user=user_to_out(activity.user),
    )


def session_to_out(db: Session, session: CatSession, activity_limit: int) -> CatSessionOut:
    return CatSessionOut(
        id=session.id,
        name=session.name,
        created_at=session.created_at.isoformat() if session.created_at else "",
        owner=user_to_out(session.owner),
        partner=user_to_out(session.partner),
        stats=stats_to_out(session.stats),
        activities=[
            activity_to_out(a) for a in recent_activities(db, session.id, activity_limit)
        ],
    )
