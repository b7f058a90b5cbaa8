# tests/v1/test_auth.py
"""Tests for registration and login endpoints."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import status
from sqlalchemy import select

from heartline.core.security import decode_access_token
from heartline.models import Account, Profile
from tests.conftest import TEST_PASSWORD, register_payload


def test_register_creates_account_and_profile(client, db_session) -> None:
    response = client.post("/api/v1/auth/register", json=register_payload())
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()

    assert data["message"] == "User registered successfully"
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "carol@example.com"
    assert "password" not in data["user"] and "password_hash" not in data["user"]
    assert decode_access_token(data["access_token"]) == data["user"]["id"]

    account = db_session.get(Account, data["user"]["id"])
    assert account is not None
    assert account.password_hash != "secret123"
    profile = db_session.get(Profile, account.id)
    assert profile is not None
    assert profile.age == account.age


def test_register_computes_age_before_birthday(client) -> None:
    today = date.today()
    # Born 30 years ago tomorrow: still 29 today.
    birthday = (today + timedelta(days=1)).replace(year=today.year - 30)
    response = client.post(
        "/api/v1/auth/register",
        json=register_payload(birthday=birthday.isoformat()),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["age"] == 29


def test_register_missing_fields(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "x@example.com", "password": "secret123"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["code"] == "MISSING_FIELDS"
    assert "birthday" in body["detail"]


def test_register_rejects_invalid_email(client) -> None:
    response = client.post("/api/v1/auth/register", json=register_payload(email="not-an-email"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_register_rejects_weak_password(client) -> None:
    response = client.post("/api/v1/auth/register", json=register_payload(password="abc"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "WEAK_PASSWORD"


def test_register_rejects_underage(client) -> None:
    birthday = date.today().replace(year=date.today().year - 17) - timedelta(days=1)
    response = client.post(
        "/api/v1/auth/register",
        json=register_payload(birthday=birthday.isoformat()),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "UNDERAGE"


def test_register_rejects_invalid_birthday(client) -> None:
    response = client.post("/api/v1/auth/register", json=register_payload(birthday="someday"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "INVALID_BIRTHDAY"


def test_register_accepts_datetime_birthday(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json=register_payload(birthday="1990-05-15T00:00:00.000Z"),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["birthday"] == "1990-05-15"


def test_register_duplicate_email(client, test_user, db_session) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json=register_payload(email=test_user.email.upper()),
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "EMAIL_EXISTS"
    count = db_session.scalars(select(Account).where(Account.email == test_user.email)).all()
    assert len(count) == 1


def test_login_success(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["id"] == test_user.id
    assert decode_access_token(data["access_token"]) == test_user.id


def test_login_wrong_password(client, test_user) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": "wrong-password"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_login_unknown_email_matches_wrong_password(client) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Invalid credentials", "code": "INVALID_CREDENTIALS"}


def test_login_missing_fields(client) -> None:
    response = client.post("/api/v1/auth/login", json={"email": "a@example.com"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "MISSING_FIELDS"
