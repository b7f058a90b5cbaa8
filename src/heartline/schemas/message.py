"""Pydantic schemas for conversations and messages."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for sending a message to a matched account."""

    receiver_id: str = Field(..., min_length=1, description="Account id of the recipient")
    content: str = Field(..., description="Message text; surrounding whitespace is trimmed")


class MessageResponse(BaseModel):
    id: int
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummaryResponse(BaseModel):
    """One inbox row."""

    conversation_id: str
    user_id: str
    name: str
    photo_url: str | None = None
    last_message: str
    last_message_time: datetime
    unread_count: int
    is_online: bool = False


class MessageListResponse(BaseModel):
    messages: list[MessageResponse]
    marked_read: int


class MarkReadResponse(BaseModel):
    message: str
    updated: int
