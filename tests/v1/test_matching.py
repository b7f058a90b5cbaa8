# tests/v1/test_matching.py
"""Tests for candidate, swipe and match endpoints."""

from __future__ import annotations

from fastapi import status
from sqlalchemy import select

from heartline.models import Match, Profile
from tests.conftest import auth_headers


def _like(client, headers, profile_id):
    return client.post("/api/v1/matching/like", json={"profile_id": profile_id}, headers=headers)


def test_candidates_exclude_self(client, test_user, other_user, auth_token) -> None:
    response = client.get("/api/v1/matching/profiles", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    ids = [profile["id"] for profile in response.json()["profiles"]]
    assert ids == [other_user.id]


def test_candidates_include_public_fields(client, other_user, auth_token) -> None:
    profile = client.get("/api/v1/matching/profiles", headers=auth_token).json()["profiles"][0]
    assert profile["name"] == "Bob"
    assert profile["gender"] == "Male"
    assert profile["bio"] == ""
    assert "email" not in profile


def test_candidates_exclude_liked_and_passed(client, make_account, test_user, auth_token) -> None:
    liked = make_account("Liked")
    passed = make_account("Passed")
    fresh = make_account("Fresh")

    assert _like(client, auth_token, liked.id).status_code == status.HTTP_200_OK
    response = client.post(
        "/api/v1/matching/pass",
        json={"profile_id": passed.id},
        headers=auth_token,
    )
    assert response.json() == {"message": "Profile passed"}

    ids = {p["id"] for p in client.get("/api/v1/matching/profiles", headers=auth_token).json()["profiles"]}
    assert ids == {fresh.id}


def test_candidates_respect_limit(client, make_account, test_user, auth_token) -> None:
    for _ in range(5):
        make_account()
    response = client.get("/api/v1/matching/profiles?limit=3", headers=auth_token)
    assert len(response.json()["profiles"]) == 3


def test_candidates_reject_non_positive_limit(client, auth_token) -> None:
    response = client.get("/api/v1/matching/profiles?limit=0", headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_candidates_create_missing_profile(client, make_account, db_session) -> None:
    newcomer = make_account("Newcomer", with_profile=False)
    assert db_session.get(Profile, newcomer.id) is None

    response = client.get("/api/v1/matching/profiles", headers=auth_headers(newcomer))
    assert response.status_code == status.HTTP_200_OK
    db_session.expire_all()
    assert db_session.get(Profile, newcomer.id).age == newcomer.age


def test_one_sided_like_is_not_a_match(client, other_user, auth_token) -> None:
    response = _like(client, auth_token, other_user.id)
    assert response.json() == {"message": "Profile liked", "is_match": False, "match": None}


def test_mutual_like_creates_match(client, test_user, other_user, auth_token, other_auth_token, db_session) -> None:
    _like(client, auth_token, other_user.id)
    response = _like(client, other_auth_token, test_user.id)
    data = response.json()

    assert data["is_match"] is True
    assert data["message"] == "It's a match!"
    assert data["match"]["user"]["id"] == test_user.id

    matches = db_session.scalars(select(Match)).all()
    assert len(matches) == 1
    assert matches[0].active is True
    db_session.expire_all()
    assert other_user.id in db_session.get(Profile, test_user.id).matches
    assert test_user.id in db_session.get(Profile, other_user.id).matches


def test_self_like_rejected(client, test_user, auth_token) -> None:
    response = _like(client, auth_token, test_user.id)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "SELF_SWIPE"


def test_like_requires_profile_id(client, auth_token) -> None:
    response = client.post("/api/v1/matching/like", json={}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "MISSING_FIELDS"


def test_like_unknown_profile_is_recorded(client, test_user, auth_token, db_session) -> None:
    response = _like(client, auth_token, "f" * 32)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["is_match"] is False
    db_session.expire_all()
    assert "f" * 32 in db_session.get(Profile, test_user.id).liked_profiles


def test_list_matches(client, matched_pair, auth_token) -> None:
    _, bob = matched_pair
    response = client.get("/api/v1/matching/matches", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    matches = response.json()["matches"]
    assert [m["user"]["id"] for m in matches] == [bob.id]
    assert matches[0]["matched_at"]


def test_list_matches_empty(client, auth_token) -> None:
    assert client.get("/api/v1/matching/matches", headers=auth_token).json() == {"matches": []}


def test_unmatch(client, matched_pair, auth_token, other_auth_token, db_session) -> None:
    alice, bob = matched_pair
    client.post(
        "/api/v1/messages/send",
        json={"receiver_id": bob.id, "content": "hi"},
        headers=auth_token,
    )

    response = client.delete(f"/api/v1/matching/matches/{bob.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "message": "Unmatched successfully",
        "was_matched": True,
        "messages_deleted": 1,
    }

    assert client.get("/api/v1/matching/matches", headers=other_auth_token).json()["matches"] == []
    match = db_session.scalars(select(Match)).one()
    assert match.active is False


def test_unmatch_twice_is_harmless(client, matched_pair, auth_token) -> None:
    _, bob = matched_pair
    client.delete(f"/api/v1/matching/matches/{bob.id}", headers=auth_token)
    response = client.delete(f"/api/v1/matching/matches/{bob.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["was_matched"] is False


def test_matching_requires_auth(client) -> None:
    response = client.get("/api/v1/matching/profiles")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
