# tests/v1/test_messages.py
"""Tests for conversation and message endpoints."""

from __future__ import annotations

from fastapi import status

from heartline.core.settings import settings
from heartline.services.conversations import EMPTY_CONVERSATION_PREVIEW, conversation_id
from heartline.services.matching import MatchEngine


def _send(client, headers, receiver_id, content):
    return client.post(
        "/api/v1/messages/send",
        json={"receiver_id": receiver_id, "content": content},
        headers=headers,
    )


def test_send_message(client, matched_pair, auth_token) -> None:
    alice, bob = matched_pair
    response = _send(client, auth_token, bob.id, "  Hello Bob  ")
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["content"] == "Hello Bob"
    assert data["sender_id"] == alice.id
    assert data["receiver_id"] == bob.id
    assert data["is_read"] is False
    assert data["conversation_id"] == conversation_id(alice.id, bob.id)


def test_send_requires_match(client, test_user, other_user, auth_token) -> None:
    response = _send(client, auth_token, other_user.id, "hi")
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "NOT_MATCHED"


def test_send_rejects_blank_content(client, matched_pair, auth_token) -> None:
    _, bob = matched_pair
    response = _send(client, auth_token, bob.id, "   ")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "EMPTY_MESSAGE"


def test_send_rejects_oversized_content(client, matched_pair, auth_token) -> None:
    _, bob = matched_pair
    response = _send(client, auth_token, bob.id, "x" * (settings.message_max_length + 1))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "MESSAGE_TOO_LONG"


def test_send_missing_receiver(client, auth_token) -> None:
    response = client.post("/api/v1/messages/send", json={"content": "hi"}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "MISSING_FIELDS"


def test_list_messages_marks_read(client, matched_pair, auth_token, other_auth_token) -> None:
    alice, bob = matched_pair
    _send(client, auth_token, bob.id, "one")
    _send(client, auth_token, bob.id, "two")
    _send(client, other_auth_token, alice.id, "three")

    response = client.get(f"/api/v1/messages/{alice.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    page = response.json()
    assert [m["content"] for m in page["messages"]] == ["one", "two", "three"]
    assert page["marked_read"] == 2
    by_content = {m["content"]: m for m in page["messages"]}
    assert by_content["one"]["is_read"] is True
    # Bob's own message stays unread until Alice views it.
    assert by_content["three"]["is_read"] is False

    again = client.get(f"/api/v1/messages/{alice.id}", headers=other_auth_token).json()
    assert again["marked_read"] == 0


def test_list_messages_requires_match(client, other_user, auth_token) -> None:
    response = client.get(f"/api/v1/messages/{other_user.id}", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_conversations_summary(client, matched_pair, auth_token, other_auth_token) -> None:
    alice, bob = matched_pair
    _send(client, other_auth_token, alice.id, "hey there")

    response = client.get("/api/v1/messages/conversations", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    [summary] = response.json()
    assert summary["user_id"] == bob.id
    assert summary["name"] == "Bob"
    assert summary["last_message"] == "hey there"
    assert summary["unread_count"] == 1
    assert summary["is_online"] is False
    assert summary["conversation_id"] == conversation_id(alice.id, bob.id)


def test_conversations_without_messages_show_placeholder(client, matched_pair, auth_token) -> None:
    [summary] = client.get("/api/v1/messages/conversations", headers=auth_token).json()
    assert summary["last_message"] == EMPTY_CONVERSATION_PREVIEW
    assert summary["unread_count"] == 0


def test_conversations_sorted_by_activity(client, matched_pair, make_account, db_session, auth_token) -> None:
    alice, bob = matched_pair
    carol = make_account("Carol")
    engine = MatchEngine(db_session)
    engine.record_like(alice.id, carol.id)
    engine.record_like(carol.id, alice.id)

    _send(client, auth_token, bob.id, "latest")

    names = [s["name"] for s in client.get("/api/v1/messages/conversations", headers=auth_token).json()]
    assert names == ["Bob", "Carol"]


def test_mark_read(client, matched_pair, auth_token, other_auth_token) -> None:
    alice, bob = matched_pair
    _send(client, auth_token, bob.id, "one")
    _send(client, auth_token, bob.id, "two")

    response = client.put(f"/api/v1/messages/{alice.id}/read", headers=other_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Messages marked as read", "updated": 2}

    response = client.put(f"/api/v1/messages/{alice.id}/read", headers=other_auth_token)
    assert response.json()["updated"] == 0


def test_send_after_unmatch_is_forbidden(client, matched_pair, auth_token) -> None:
    _, bob = matched_pair
    client.delete(f"/api/v1/matching/matches/{bob.id}", headers=auth_token)
    response = _send(client, auth_token, bob.id, "still there?")
    assert response.status_code == status.HTTP_403_FORBIDDEN
