"""
Activity Log: records an action on a cat and applies it to the stats.

log_activity(db, session_id, user_id, action) → ActivityResult

Flow (one transaction, one commit):
  validate action → session & user exist → insert Activity
  → SELECT stats FOR UPDATE (seed if missing) → apply_action → commit

The row lock serialises concurrent actions on the same session, so two
requests cannot both read the old stats and overwrite each other.
SQLite ignores FOR UPDATE; it serialises writers on its own.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from meowpair.core.errors import NotFoundError, ValidationError
from meowpair.models.activity import Activity, CatAction
from meowpair.models.cat_session import CatSession
from meowpair.models.cat_stats import CatStats
from meowpair.models.user import User
from meowpair.services.sessions import recent_activities, seed_stats
from meowpair.services.stat_engine import CatStatValues, apply_action

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100


@dataclass
class ActivityResult:
    activity: Activity
    stats: CatStats


def parse_action(action: str | CatAction) -> CatAction:
    try:
        return CatAction(action)
    except ValueError:
        valid = ", ".join(a.value for a in CatAction)
        raise ValidationError(
            f"Invalid action {action!r}. Expected one of: {valid}.", field="action"
        ) from None


def _lock_stats(db: Session, session_id: int) -> CatStats:
    stats = (
        db.query(CatStats)
        .filter(CatStats.session_id == session_id)
        .with_for_update()
        .first()
    )
    if stats is None:
        logger.warning("Session %s had no stats row; seeding", session_id)
        stats = seed_stats(session_id)
        db.add(stats)
        db.flush()
    return stats


def log_activity(
    db: Session,
    session_id: int,
    user_id: int,
    action: str | CatAction,
) -> ActivityResult:
    cat_action = parse_action(action)
    if db.get(CatSession, session_id) is None:
        raise NotFoundError("CatSession", session_id)
    if db.get(User, user_id) is None:
        raise NotFoundError("User", user_id)

    activity = Activity(session_id=session_id, user_id=user_id, action=cat_action)
    db.add(activity)
    db.flush()

    stats = _lock_stats(db, session_id)
    current = CatStatValues(love=stats.love, hunger=stats.hunger, happiness=stats.happiness)
    updated = apply_action(current, cat_action)
    stats.love = updated.love
    stats.hunger = updated.hunger
    stats.happiness = updated.happiness

    db.commit()
    db.refresh(activity)
    db.refresh(stats)
    logger.info(
        "Session %s: user %s did %s → %s",
        session_id, user_id, cat_action.value, updated.as_dict(),
    )
    return ActivityResult(activity=activity, stats=stats)


def list_activities(db: Session, session_id: int, limit: int = 10) -> list[Activity]:
    if not 1 <= limit <= MAX_LIST_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}.", field="limit")
    if db.get(CatSession, session_id) is None:
        raise NotFoundError("CatSession", session_id)
    return recent_activities(db, session_id, limit)
