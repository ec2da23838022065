"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Tables are shared by the whole session: every test works with fresh fids
and wallet addresses from the `new_fid` / `new_address` fixtures.
"""
import itertools
import os
import uuid

SQLITE_URL = "sqlite:///./test_meowpair.db"

os.environ["DATABASE_URL"] = SQLITE_URL
os.environ["APP_ENV"] = "development"
os.environ["NOTIFICATION_STORE_URL"] = ""
os.environ["MARKETPLACE_ADDRESS"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from meowpair.db.base import Base, get_db
from meowpair.main import app
from meowpair.core.security import QuickAuthVerifier, get_verifier
from meowpair.services.notifications import InMemoryNotificationStore, get_notification_store
import meowpair.models  # noqa: F401

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_DOMAIN = "meowpair.test"
TEST_ISSUER = "https://auth.farcaster.xyz"

_fid_counter = itertools.count(1_000_000)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def offline_verifier() -> QuickAuthVerifier:
    """Raw fids accepted; JWTs checked against an empty key set (never network)."""
    return QuickAuthVerifier(
        domain=TEST_DOMAIN,
        issuer=TEST_ISSUER,
        jwks_url="https://jwks.invalid/keys.json",
        algorithms=["HS256"],
        allow_raw_fid=True,
        jwks={"keys": []},
    )


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def notification_store():
    return InMemoryNotificationStore()


@pytest.fixture()
def client(db, notification_store):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_verifier] = offline_verifier
    app.dependency_overrides[get_notification_store] = lambda: notification_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def new_fid():
    """Callable returning a fid no other test has used."""
    return lambda: next(_fid_counter)


@pytest.fixture()
def new_address():
    """Callable returning a fresh lower-case wallet address."""
    return lambda: "0x" + uuid.uuid4().hex + uuid.uuid4().hex[:8]


@pytest.fixture()
def auth():
    """auth(fid) → headers for a development raw-fid bearer token."""
    return lambda fid: {"Authorization": f"Bearer {fid}"}
