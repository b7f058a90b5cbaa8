# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import date
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI, WebSocketDisconnect
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from heartline.core.security import create_access_token, hash_password  # noqa: E402
from heartline.db.session import Base  # noqa: E402
from heartline.db.session import get_db as app_get_session  # noqa: E402
from heartline.main import app as fastapi_app  # noqa: E402
from heartline.models import Account  # noqa: E402
from heartline.services.accounts import calculate_age  # noqa: E402
from heartline.services.matching import MatchEngine  # noqa: E402
from heartline.services.presence import PresenceRegistry, get_presence  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse"

_ACCOUNT_COUNTER = count(1)
# Hashed once; Argon2id costs ~0.1s per call.
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def presence() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    presence: PresenceRegistry,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_presence] = lambda: presence
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_presence, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_account(db_session: Session) -> Callable[..., Account]:
    """Return a factory that persists accounts (with a profile by default)."""

    def _make(
        name: str | None = None,
        *,
        birthday: date = date(1995, 5, 15),
        gender: str = "Female",
        with_profile: bool = True,
        **fields: Any,
    ) -> Account:
        n = next(_ACCOUNT_COUNTER)
        account = Account(
            name=name or f"User {n}",
            email=fields.pop("email", f"user{n}@example.com"),
            password_hash=_TEST_PASSWORD_HASH,
            gender=gender,
            birthday=birthday,
            age=calculate_age(birthday),
            **fields,
        )
        db_session.add(account)
        db_session.flush()
        if with_profile:
            MatchEngine(db_session).ensure_profile(account.id)
        db_session.commit()
        return account

    return _make


@pytest.fixture()
def test_user(make_account: Callable[..., Account]) -> Account:
    """Create and return the primary test account."""
    return make_account("Alice", email="alice@example.com")


@pytest.fixture()
def other_user(make_account: Callable[..., Account]) -> Account:
    """Create and return a second test account."""
    return make_account("Bob", email="bob@example.com", gender="Male")


@pytest.fixture()
def auth_token(test_user: Account) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: Account) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def matched_pair(db_session: Session, test_user: Account, other_user: Account) -> tuple[Account, Account]:
    """Two accounts that liked each other."""
    engine = MatchEngine(db_session)
    engine.record_like(test_user.id, other_user.id)
    outcome = engine.record_like(other_user.id, test_user.id)
    assert outcome.matched
    return test_user, other_user


def auth_headers(account: Account) -> dict[str, str]:
    token = create_access_token(account.id)
    return {"Authorization": f"Bearer {token}"}


def register_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Carol",
        "email": "carol@example.com",
        "password": "secret123",
        "gender": "Female",
        "birthday": "1994-03-02",
    }
    payload.update(overrides)
    return payload


class FakeSocket:
    """Records frames in place of a WebSocket."""

    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.broken = broken

    async def send_json(self, data: Any) -> None:
        if self.broken:
            raise WebSocketDisconnect(code=1006)
        self.sent.append(data)
