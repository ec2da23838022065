"""
Integration tests for API endpoints using the SQLite test DB.
"""
import pytest

from meowpair.models.activity import Activity
from meowpair.models.log_entry import LogEntry
from meowpair.models.user import User
from meowpair.models.wallet_connection import WalletConnection


def _create_session(client, auth, fid, **body):
    r = client.post("/cat-session", json=body, headers=auth(fid))
    assert r.status_code == 201, r.text
    return r.json()["session"]


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestAuth:
    def test_missing_header_is_401(self, client):
        r = client.get("/cat-session")
        assert r.status_code == 401
        assert r.json()["code"] == "UNAUTHORIZED"

    def test_garbage_token_is_401(self, client):
        r = client.get("/cat-session", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 401

    def test_zero_fid_is_401(self, client):
        r = client.get("/cat-session", headers={"Authorization": "Bearer 0"})
        assert r.status_code == 401


class TestCatSession:
    def test_create_with_seed_stats(self, client, auth, new_fid):
        fid = new_fid()
        session = _create_session(client, auth, fid)
        assert session["name"] == "cattyyy"
        assert session["owner"]["fid"] == fid
        assert session["owner"]["username"] == f"user_{fid}"
        assert session["partner"] is None
        assert session["stats"] == {"love": 50, "hunger": 30, "happiness": 75}
        assert session["activities"] == []

    def test_create_with_partner_and_name(self, client, auth, new_fid):
        fid, partner_fid = new_fid(), new_fid()
        session = _create_session(client, auth, fid, partner_fid=partner_fid, name="Mochi")
        assert session["name"] == "Mochi"
        assert session["partner"]["fid"] == partner_fid

    def test_create_links_wallet(self, client, auth, new_fid, new_address):
        fid, address = new_fid(), new_address()
        session = _create_session(client, auth, fid, wallet_address=address)
        assert session["owner"]["address"] == address

    def test_self_partnering_rejected(self, client, auth, new_fid):
        fid = new_fid()
        r = client.post("/cat-session", json={"partner_fid": fid}, headers=auth(fid))
        assert r.status_code == 400
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_bad_partner_fid_rejected(self, client, auth, new_fid):
        r = client.post("/cat-session", json={"partner_fid": -5}, headers=auth(new_fid()))
        assert r.status_code == 400

    def test_list_sessions_for_owner_and_partner(self, client, auth, new_fid):
        owner, partner = new_fid(), new_fid()
        shared = _create_session(client, auth, owner, partner_fid=partner)
        solo = _create_session(client, auth, owner)

        r = client.get("/cat-session", headers=auth(owner))
        assert r.status_code == 200
        assert [s["id"] for s in r.json()["sessions"]] == [solo["id"], shared["id"]]

        r = client.get("/cat-session", headers=auth(partner))
        assert [s["id"] for s in r.json()["sessions"]] == [shared["id"]]

    def test_list_for_unknown_user_is_404(self, client, auth, new_fid):
        r = client.get("/cat-session", headers=auth(new_fid()))
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_read_single_session_members_only(self, client, auth, new_fid):
        owner, partner, stranger = new_fid(), new_fid(), new_fid()
        session = _create_session(client, auth, owner, partner_fid=partner)

        assert client.get(f"/cat-session/{session['id']}", headers=auth(owner)).status_code == 200
        assert client.get(f"/cat-session/{session['id']}", headers=auth(partner)).status_code == 200
        assert client.get(f"/cat-session/{session['id']}", headers=auth(stranger)).status_code == 404

    def test_creation_is_logged(self, client, auth, new_fid, db):
        fid = new_fid()
        _create_session(client, auth, fid)
        messages = [e.message for e in db.query(LogEntry).filter(LogEntry.fid == fid).all()]
        assert "Create cat session request received" in messages
        assert "Cat session created" in messages


class TestActivity:
    def test_log_on_existing_session(self, client, auth, new_fid):
        fid = new_fid()
        session = _create_session(client, auth, fid)

        r = client.post("/activity", json={"session_id": session["id"], "action": "cuddle"}, headers=auth(fid))
        assert r.status_code == 201
        body = r.json()
        assert body["session_id"] == session["id"]
        assert body["stats"] == {"love": 60, "hunger": 30, "happiness": 90}
        assert body["activity"]["action"] == "cuddle"
        assert body["activity"]["user"]["fid"] == fid

        r = client.post("/activity", json={"session_id": session["id"], "action": "cuddle"}, headers=auth(fid))
        assert r.json()["stats"] == {"love": 70, "hunger": 30, "happiness": 100}

    def test_log_without_session_creates_quick_session(self, client, auth, new_fid):
        fid = new_fid()
        r = client.post("/activity", json={"action": "feed"}, headers=auth(fid))
        assert r.status_code == 201
        body = r.json()
        assert body["stats"] == {"love": 50, "hunger": 50, "happiness": 80}

        sessions = client.get("/cat-session", headers=auth(fid)).json()["sessions"]
        assert [s["id"] for s in sessions] == [body["session_id"]]
        assert sessions[0]["name"] == "Quick Cat Session"

    def test_wallet_only_caller_is_resolved_by_address(self, client, auth, new_fid, new_address):
        fid, address = new_fid(), new_address()
        r = client.post("/activity", json={"action": "love", "wallet_address": address}, headers=auth(fid))
        assert r.status_code == 201
        assert r.json()["activity"]["user"]["address"] == address

    def test_invalid_action_is_400(self, client, auth, new_fid):
        r = client.post("/activity", json={"action": "dance"}, headers=auth(new_fid()))
        assert r.status_code == 400
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any("action" in e["field"] for e in body["details"]["errors"])

    def test_missing_action_is_400(self, client, auth, new_fid):
        r = client.post("/activity", json={}, headers=auth(new_fid()))
        assert r.status_code == 400

    def test_unknown_session_is_404(self, client, auth, new_fid):
        r = client.post("/activity", json={"session_id": 987654321, "action": "feed"}, headers=auth(new_fid()))
        assert r.status_code == 404

    def test_list_activities_limit_newest_first(self, client, auth, new_fid):
        fid = new_fid()
        session = _create_session(client, auth, fid)
        ids = []
        for action in ("feed", "cuddle", "love", "feed", "love"):
            r = client.post("/activity", json={"session_id": session["id"], "action": action}, headers=auth(fid))
            ids.append(r.json()["activity"]["id"])

        r = client.get(f"/activity?session_id={session['id']}&limit=2", headers=auth(fid))
        assert r.status_code == 200
        activities = r.json()["activities"]
        assert [a["id"] for a in activities] == [ids[4], ids[3]]
        assert [a["action"] for a in activities] == ["love", "feed"]

    def test_list_requires_session_id(self, client, auth, new_fid):
        r = client.get("/activity", headers=auth(new_fid()))
        assert r.status_code == 400

    @pytest.mark.parametrize("limit", [0, 101])
    def test_list_limit_bounds(self, client, auth, new_fid, limit):
        r = client.get(f"/activity?session_id=1&limit={limit}", headers=auth(new_fid()))
        assert r.status_code == 400

    def test_list_unknown_session_is_404(self, client, auth, new_fid):
        r = client.get("/activity?session_id=987654321", headers=auth(new_fid()))
        assert r.status_code == 404


class TestWalletConnection:
    def test_log_and_fetch(self, client, auth, new_fid, new_address):
        fid, address = new_fid(), new_address()
        r = client.post(
            "/wallet-connection",
            json={"address": address, "chain_id": 8453, "connector": "farcasterFrame"},
            headers=auth(fid),
        )
        assert r.status_code == 201
        connection = r.json()["connection"]
        assert connection["address"] == address
        assert connection["user"]["fid"] == fid

        r = client.get(f"/wallet-connection?address={address}", headers=auth(fid))
        assert r.status_code == 200
        assert r.json()["connection"]["chain_id"] == 8453

    def test_reconnect_overwrites(self, client, auth, new_fid, new_address, db):
        fid, address = new_fid(), new_address()
        body = {"address": address, "chain_id": 8453, "connector": "farcasterFrame"}
        client.post("/wallet-connection", json=body, headers=auth(fid))
        body.update(chain_id=84532, connector="coinbaseWallet")
        r = client.post("/wallet-connection", json=body, headers=auth(fid))

        assert r.json()["connection"]["connector"] == "coinbaseWallet"
        assert db.query(WalletConnection).filter(WalletConnection.address == address).count() == 1

    def test_checksummed_address_is_normalized(self, client, auth, new_fid, new_address):
        fid, address = new_fid(), new_address()
        mixed = "0x" + address[2:].upper()
        r = client.post(
            "/wallet-connection",
            json={"address": mixed, "chain_id": 1, "connector": "injected"},
            headers=auth(fid),
        )
        assert r.json()["connection"]["address"] == address

    def test_missing_fields_is_400(self, client, auth, new_fid, new_address):
        r = client.post("/wallet-connection", json={"address": new_address()}, headers=auth(new_fid()))
        assert r.status_code == 400

    def test_bad_address_is_400(self, client, auth, new_fid):
        r = client.post(
            "/wallet-connection",
            json={"address": "0x123", "chain_id": 1, "connector": "injected"},
            headers=auth(new_fid()),
        )
        assert r.status_code == 400

    def test_unknown_address_is_404(self, client, auth, new_fid, new_address):
        r = client.get(f"/wallet-connection?address={new_address()}", headers=auth(new_fid()))
        assert r.status_code == 404

    def test_query_address_is_validated(self, client, auth, new_fid):
        r = client.get("/wallet-connection?address=nope", headers=auth(new_fid()))
        assert r.status_code == 400


class TestCallerIdentity:
    """The bearer fid decides who acts; body wallets and session ids cannot override it."""

    def _bind_wallet(self, client, auth, fid, address):
        r = client.post(
            "/wallet-connection",
            json={"address": address, "chain_id": 8453, "connector": "farcasterFrame"},
            headers=auth(fid),
        )
        assert r.status_code == 201

    def test_foreign_wallet_cannot_own_a_session(self, client, auth, new_fid, new_address):
        victim, intruder, address = new_fid(), new_fid(), new_address()
        self._bind_wallet(client, auth, victim, address)

        r = client.post("/cat-session", json={"wallet_address": address}, headers=auth(intruder))
        assert r.status_code == 400
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["field"] == "wallet_address"
        assert client.get("/cat-session", headers=auth(victim)).json()["sessions"] == []

    def test_foreign_wallet_cannot_log_activity(self, client, auth, new_fid, new_address, db):
        victim, intruder, address = new_fid(), new_fid(), new_address()
        self._bind_wallet(client, auth, victim, address)

        r = client.post("/activity", json={"action": "love", "wallet_address": address}, headers=auth(intruder))
        assert r.status_code == 400
        victim_id = db.query(User).filter(User.fid == victim).one().id
        assert db.query(Activity).filter(Activity.user_id == victim_id).count() == 0

    def test_foreign_wallet_cannot_be_reconnected(self, client, auth, new_fid, new_address):
        victim, intruder, address = new_fid(), new_fid(), new_address()
        self._bind_wallet(client, auth, victim, address)

        r = client.post(
            "/wallet-connection",
            json={"address": address, "chain_id": 1, "connector": "injected"},
            headers=auth(intruder),
        )
        assert r.status_code == 400
        r = client.get(f"/wallet-connection?address={address}", headers=auth(victim))
        assert r.json()["connection"]["user"]["fid"] == victim
        assert r.json()["connection"]["chain_id"] == 8453

    def test_own_wallet_is_accepted(self, client, auth, new_fid, new_address):
        fid, address = new_fid(), new_address()
        self._bind_wallet(client, auth, fid, address)
        session = _create_session(client, auth, fid, wallet_address=address)
        assert session["owner"]["fid"] == fid

    def test_non_member_cannot_log_activity(self, client, auth, new_fid):
        owner, stranger = new_fid(), new_fid()
        session = _create_session(client, auth, owner)

        r = client.post("/activity", json={"session_id": session["id"], "action": "feed"}, headers=auth(stranger))
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

        r = client.get(f"/cat-session/{session['id']}", headers=auth(owner))
        assert r.json()["session"]["stats"] == {"love": 50, "hunger": 30, "happiness": 75}
        assert r.json()["session"]["activities"] == []

    def test_non_member_cannot_list_activities(self, client, auth, new_fid):
        owner, stranger = new_fid(), new_fid()
        session = _create_session(client, auth, owner)
        client.post("/activity", json={"session_id": session["id"], "action": "feed"}, headers=auth(owner))

        r = client.get(f"/activity?session_id={session['id']}", headers=auth(stranger))
        assert r.status_code == 404

    def test_partner_can_log_and_list(self, client, auth, new_fid):
        owner, partner = new_fid(), new_fid()
        session = _create_session(client, auth, owner, partner_fid=partner)

        r = client.post("/activity", json={"session_id": session["id"], "action": "cuddle"}, headers=auth(partner))
        assert r.status_code == 201
        r = client.get(f"/activity?session_id={session['id']}", headers=auth(partner))
        assert [a["user"]["fid"] for a in r.json()["activities"]] == [partner]
