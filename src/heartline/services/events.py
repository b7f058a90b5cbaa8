"""Real-time event catalog and payload builders.

Services describe what happened as :class:`RealtimeEvent` values; the
presence registry decides who (if anyone) receives them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from heartline.db.time import as_utc, utcnow
from heartline.models import Message

# Client -> server
ANNOUNCE = "announce"
ANNOUNCE_LEGACY = "join"
SEND_MESSAGE = "send_message"
TYPING = "typing"
STOP_TYPING = "stop_typing"

# Server -> client
RECEIVE_MESSAGE = "receive_message"
USER_TYPING = "user_typing"
USER_STOP_TYPING = "user_stop_typing"
USER_ONLINE = "user_online"
USER_OFFLINE = "user_offline"
USER_UNMATCHED = "user_unmatched"
ERROR = "error"


@dataclass(frozen=True)
class RealtimeEvent:
    """A server-to-client notification.

    ``recipient_id`` of ``None`` means every announced connection.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    recipient_id: str | None = None

    @property
    def is_broadcast(self) -> bool:
        return self.recipient_id is None


def message_delivered(message: Message) -> RealtimeEvent:
    return RealtimeEvent(
        name=RECEIVE_MESSAGE,
        recipient_id=message.receiver_id,
        payload={
            "id": message.id,
            "conversation_id": message.conversation_id,
            "sender_id": message.sender_id,
            "receiver_id": message.receiver_id,
            "content": message.content,
            "timestamp": as_utc(message.created_at).isoformat(),
        },
    )


def typing_changed(sender_id: str, receiver_id: str, *, typing: bool) -> RealtimeEvent:
    return RealtimeEvent(
        name=USER_TYPING if typing else USER_STOP_TYPING,
        recipient_id=receiver_id,
        payload={"user_id": sender_id, "timestamp": utcnow().isoformat()},
    )


def presence_changed(user_id: str, *, online: bool) -> RealtimeEvent:
    return RealtimeEvent(
        name=USER_ONLINE if online else USER_OFFLINE,
        payload={"user_id": user_id, "timestamp": utcnow().isoformat()},
    )


def unmatched_notice(actor_id: str, counterpart_id: str) -> RealtimeEvent:
    return RealtimeEvent(
        name=USER_UNMATCHED,
        recipient_id=counterpart_id,
        payload={
            "user_id": actor_id,
            "message": "You have been unmatched",
            "timestamp": utcnow().isoformat(),
        },
    )
