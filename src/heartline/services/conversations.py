"""Conversation identity and message history.

Conversations are not stored; a conversation is identified by a key derived
from its two participants, and messages carry that key.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from heartline.core.errors import ForbiddenError, ValidationFailedError
from heartline.core.settings import settings
from heartline.db.time import as_utc
from heartline.models import Account, Match, Message

logger = logging.getLogger(__name__)

CONVERSATION_SEPARATOR = "_"
EMPTY_CONVERSATION_PREVIEW = "Start a conversation"


def conversation_id(user_a: str, user_b: str) -> str:
    """Return the order-independent key shared by both participants."""
    if not user_a or not user_b:
        raise ValueError("Both participant identifiers are required")
    return CONVERSATION_SEPARATOR.join(sorted((user_a, user_b)))


@dataclass
class ConversationSummary:
    """One row of a user's inbox."""

    conversation_id: str
    counterpart: Account
    last_message: Message | None
    last_activity: datetime
    unread_count: int
    is_online: bool = False

    @property
    def preview(self) -> str:
        if self.last_message is None:
            return EMPTY_CONVERSATION_PREVIEW
        return self.last_message.content


@dataclass
class MessagePage:
    """Messages of a conversation plus how many were marked read by viewing it."""

    messages: list[Message]
    marked_read: int


class ConversationService:
    """Reads and writes message history between matched accounts."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def require_match(self, user_a: str, user_b: str) -> Match:
        """Return the active match for the pair or raise ``ForbiddenError``.

        Runs before every message read or write.
        """
        if not user_a or not user_b:
            raise ValidationFailedError("Both participant identifiers are required", code="MISSING_FIELDS")
        match = self.db.scalars(
            select(Match).where(
                or_(
                    (Match.user1_id == user_a) & (Match.user2_id == user_b),
                    (Match.user1_id == user_b) & (Match.user2_id == user_a),
                ),
                Match.active.is_(True),
            )
        ).first()
        if match is None:
            raise ForbiddenError(
                "You can only message users you have matched with",
                code="NOT_MATCHED",
            )
        return match

    def _last_message(self, key: str) -> Message | None:
        return self.db.scalars(
            select(Message)
            .where(Message.conversation_id == key)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        ).first()

    def unread_count(self, owner_id: str, counterpart_id: str) -> int:
        """Count messages addressed to ``owner_id`` that are still unread."""
        return self.db.scalar(
            select(func.count())
            .select_from(Message)
            .where(
                Message.conversation_id == conversation_id(owner_id, counterpart_id),
                Message.receiver_id == owner_id,
                Message.is_read.is_(False),
            )
        ) or 0

    def list_conversations(
        self,
        owner_id: str,
        is_online: Callable[[str], bool] | None = None,
    ) -> list[ConversationSummary]:
        """Summarize every active match of ``owner_id``, most recent activity first.

        Conversations without messages sort by the time the match was made.
        """
        matches = self.db.scalars(
            select(Match).where(
                or_(Match.user1_id == owner_id, Match.user2_id == owner_id),
                Match.active.is_(True),
            )
        ).all()

        summaries: list[ConversationSummary] = []
        for match in matches:
            counterpart_id = match.counterpart_of(owner_id)
            counterpart = self.db.get(Account, counterpart_id)
            if counterpart is None:
                continue
            key = conversation_id(owner_id, counterpart_id)
            last_message = self._last_message(key)
            last_activity = last_message.created_at if last_message else match.matched_at
            summaries.append(
                ConversationSummary(
                    conversation_id=key,
                    counterpart=counterpart,
                    last_message=last_message,
                    last_activity=as_utc(last_activity),
                    unread_count=self.unread_count(owner_id, counterpart_id),
                    is_online=bool(is_online and is_online(counterpart_id)),
                )
            )

        summaries.sort(key=lambda summary: summary.last_activity, reverse=True)
        return summaries

    def list_messages(self, owner_id: str, counterpart_id: str) -> MessagePage:
        """Return the latest messages of the conversation in ascending order.

        Side effect: viewing the conversation marks every unread message
        addressed to ``owner_id`` as read. ``MessagePage.marked_read`` reports
        how many changed, so a second call right after reports 0.
        """
        self.require_match(owner_id, counterpart_id)
        key = conversation_id(owner_id, counterpart_id)
        newest_first = self.db.scalars(
            select(Message)
            .where(Message.conversation_id == key)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(settings.message_history_limit)
        ).all()
        messages = list(reversed(newest_first))
        marked = self._mark_read(owner_id, key)
        return MessagePage(messages=messages, marked_read=marked)

    def send_message(self, sender_id: str, receiver_id: str, content: str | None) -> Message:
        """Persist a message from ``sender_id`` to a matched ``receiver_id``.

        Delivery to a connected receiver is left to the caller.
        """
        if content is not None and not isinstance(content, str):
            raise ValidationFailedError("Message content must be text")
        text = (content or "").strip()
        if not text:
            raise ValidationFailedError("Message content is required", code="EMPTY_MESSAGE")
        if len(text) > settings.message_max_length:
            raise ValidationFailedError(
                f"Message content exceeds {settings.message_max_length} characters",
                code="MESSAGE_TOO_LONG",
            )
        self.require_match(sender_id, receiver_id)

        message = Message(
            conversation_id=conversation_id(sender_id, receiver_id),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=text,
            is_read=False,
        )
        try:
            self.db.add(message)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(message)
        logger.debug("Stored message %s in %s", message.id, message.conversation_id)
        return message

    def mark_read(self, owner_id: str, counterpart_id: str) -> int:
        """Mark everything addressed to ``owner_id`` in the conversation as read.

        Idempotent: returns 0 when nothing was unread.
        """
        self.require_match(owner_id, counterpart_id)
        return self._mark_read(owner_id, conversation_id(owner_id, counterpart_id))

    def _mark_read(self, owner_id: str, key: str) -> int:
        try:
            result = self.db.execute(
                update(Message)
                .where(
                    Message.conversation_id == key,
                    Message.receiver_id == owner_id,
                    Message.is_read.is_(False),
                )
                .values(is_read=True)
                .execution_options(synchronize_session="fetch")
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return result.rowcount or 0
