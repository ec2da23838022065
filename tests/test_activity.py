"""
Tests for the Activity Log (db fixture, no HTTP).
"""
import pytest

from meowpair.core.errors import NotFoundError, ValidationError
from meowpair.models.activity import Activity, CatAction
from meowpair.models.cat_stats import CatStats
from meowpair.services.activity import list_activities, log_activity, parse_action
from meowpair.services.identity import resolve_or_create_user
from meowpair.services.sessions import create_session


@pytest.fixture()
def user(db, new_fid):
    return resolve_or_create_user(db, fid=new_fid())


@pytest.fixture()
def session(db, user):
    return create_session(db, owner_id=user.id)


def _stats(result):
    return (result.stats.love, result.stats.hunger, result.stats.happiness)


class TestLogActivity:
    def test_cuddle_twice_clamps_happiness(self, db, user, session):
        first = log_activity(db, session.id, user.id, "cuddle")
        assert _stats(first) == (60, 30, 90)

        second = log_activity(db, session.id, user.id, "cuddle")
        assert _stats(second) == (70, 30, 100)

    def test_feed_from_seed(self, db, user, session):
        result = log_activity(db, session.id, user.id, CatAction.feed)
        assert _stats(result) == (50, 50, 80)
        assert result.activity.action == CatAction.feed
        assert result.activity.user.id == user.id

    def test_one_activity_row_per_call(self, db, user, session):
        log_activity(db, session.id, user.id, "love")
        assert db.query(Activity).filter(Activity.session_id == session.id).count() == 1

    def test_stats_persisted(self, db, user, session):
        log_activity(db, session.id, user.id, "love")
        db.expire_all()
        stats = db.query(CatStats).filter(CatStats.session_id == session.id).one()
        assert (stats.love, stats.hunger, stats.happiness) == (65, 30, 85)

    def test_missing_stats_row_is_seeded(self, db, user, session):
        db.query(CatStats).filter(CatStats.session_id == session.id).delete()
        db.commit()

        result = log_activity(db, session.id, user.id, "feed")
        assert _stats(result) == (50, 50, 80)
        assert db.query(CatStats).filter(CatStats.session_id == session.id).count() == 1

    def test_partner_actions_share_stats(self, db, user, new_fid):
        partner = resolve_or_create_user(db, fid=new_fid())
        shared = create_session(db, owner_id=user.id, partner_id=partner.id)
        log_activity(db, shared.id, user.id, "love")
        result = log_activity(db, shared.id, partner.id, "love")
        assert result.stats.love == 80


class TestLogActivityRejections:
    def test_invalid_action_writes_nothing(self, db, user, session):
        with pytest.raises(ValidationError):
            log_activity(db, session.id, user.id, "dance")
        assert db.query(Activity).filter(Activity.session_id == session.id).count() == 0

    def test_unknown_session(self, db, user):
        with pytest.raises(NotFoundError):
            log_activity(db, 987654321, user.id, "feed")

    def test_unknown_user(self, db, session):
        with pytest.raises(NotFoundError):
            log_activity(db, session.id, 987654321, "feed")

    def test_parse_action_message_lists_choices(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_action("nap")
        assert "feed" in exc_info.value.message
        assert exc_info.value.details["field"] == "action"


class TestListActivities:
    def test_limit_and_newest_first(self, db, user, session):
        logged = [
            log_activity(db, session.id, user.id, action).activity.id
            for action in ("feed", "cuddle", "love", "feed", "cuddle")
        ]
        page = list_activities(db, session.id, limit=2)
        assert [a.id for a in page] == [logged[4], logged[3]]
        assert all(a.user.id == user.id for a in page)

    def test_default_limit(self, db, user, session):
        for _ in range(12):
            log_activity(db, session.id, user.id, "feed")
        assert len(list_activities(db, session.id)) == 10

    def test_unknown_session(self, db):
        with pytest.raises(NotFoundError):
            list_activities(db, 987654321)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, db, session, limit):
        with pytest.raises(ValidationError):
            list_activities(db, session.id, limit=limit)
