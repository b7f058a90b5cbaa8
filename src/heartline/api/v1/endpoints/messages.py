# src/heartline/api/v1/endpoints/messages.py
"""Conversation and message endpoints for the Heartline API."""

from __future__ import annotations

from fastapi import APIRouter, status
from starlette.concurrency import run_in_threadpool

from heartline.schemas.common import ErrorResponse
from heartline.schemas.message import (
    ConversationSummaryResponse,
    MarkReadResponse,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
)
from heartline.services import events
from heartline.services.conversations import ConversationSummary

from ..dependencies import ConversationServiceDep, CurrentUserDep, PresenceDep

router = APIRouter(
    prefix="/messages",
    tags=["messages"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


def _serialize_summary(summary: ConversationSummary) -> ConversationSummaryResponse:
    return ConversationSummaryResponse(
        conversation_id=summary.conversation_id,
        user_id=summary.counterpart.id,
        name=summary.counterpart.name,
        photo_url=summary.counterpart.photo_url,
        last_message=summary.preview,
        last_message_time=summary.last_activity,
        unread_count=summary.unread_count,
        is_online=summary.is_online,
    )


@router.get("/conversations", response_model=list[ConversationSummaryResponse])
def list_conversations(
    current_user: CurrentUserDep,
    conversations: ConversationServiceDep,
    presence: PresenceDep,
) -> list[ConversationSummaryResponse]:
    """Inbox of the caller, most recent activity first."""
    summaries = conversations.list_conversations(current_user.id, is_online=presence.is_online)
    return [_serialize_summary(summary) for summary in summaries]


@router.post(
    "/send",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def send_message(
    payload: MessageCreate,
    current_user: CurrentUserDep,
    conversations: ConversationServiceDep,
    presence: PresenceDep,
) -> MessageResponse:
    """Store a message and push it to the receiver if connected."""
    message = await run_in_threadpool(
        conversations.send_message, current_user.id, payload.receiver_id, payload.content
    )
    await presence.deliver(events.message_delivered(message))
    return MessageResponse.model_validate(message)


@router.get("/{other_user_id}", response_model=MessageListResponse)
def list_messages(
    other_user_id: str,
    current_user: CurrentUserDep,
    conversations: ConversationServiceDep,
) -> MessageListResponse:
    """Latest messages in ascending order.

    Viewing the conversation marks every message addressed to the caller as
    read; ``marked_read`` reports how many changed.
    """
    page = conversations.list_messages(current_user.id, other_user_id)
    return MessageListResponse(
        messages=[MessageResponse.model_validate(message) for message in page.messages],
        marked_read=page.marked_read,
    )


@router.put("/{other_user_id}/read", response_model=MarkReadResponse)
def mark_read(
    other_user_id: str,
    current_user: CurrentUserDep,
    conversations: ConversationServiceDep,
) -> MarkReadResponse:
    updated = conversations.mark_read(current_user.id, other_user_id)
    return MarkReadResponse(message="Messages marked as read", updated=updated)
