"""Client event handling for the real-time channel."""

from __future__ import annotations

import json
import logging
from typing import Any

from starlette.concurrency import run_in_threadpool

from heartline.core.errors import AppError, AuthenticationError, ForbiddenError, ValidationFailedError
from heartline.core.security import decode_access_token
from heartline.core.settings import settings

from . import events
from .conversations import ConversationService
from .presence import Connection, ConnectionState, PresenceRegistry

logger = logging.getLogger(__name__)


class RealtimeGateway:
    """Applies client frames from one connection to the presence map and history.

    Frames are JSON objects of the form ``{"event": <name>, "data": {...}}``.
    Failures are reported back to the originating connection as ``error``
    events and never close the channel.
    """

    def __init__(
        self,
        presence: PresenceRegistry,
        conversations: ConversationService,
        *,
        require_token: bool | None = None,
    ) -> None:
        self.presence = presence
        self.conversations = conversations
        self.require_token = settings.realtime_require_token if require_token is None else require_token

    async def handle_text(self, connection: Connection, raw: str) -> None:
        try:
            frame = json.loads(raw)
        except json.JSONDecodeError:
            await self._send_error(connection, ValidationFailedError("Frames must be JSON objects"))
            return
        await self.handle_frame(connection, frame)

    async def handle_frame(self, connection: Connection, frame: Any) -> None:
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await self._send_error(connection, ValidationFailedError("Frame is missing an event name"))
            return
        name = frame["event"]
        data = frame.get("data")
        if data is None:
            data = {}

        try:
            if name in (events.ANNOUNCE, events.ANNOUNCE_LEGACY):
                await self.announce(connection, data)
            elif name == events.SEND_MESSAGE:
                await self.send_message(connection, _as_dict(data))
            elif name in (events.TYPING, events.STOP_TYPING):
                await self.typing(connection, _as_dict(data), typing=name == events.TYPING)
            else:
                raise ValidationFailedError(f"Unknown event: {name}", code="UNKNOWN_EVENT")
        except AppError as err:
            await self._send_error(connection, err, event=name)

    async def announce(self, connection: Connection, data: Any) -> None:
        """Bind the connection to an identity and tell everyone it is online."""
        # Older clients send the bare identity instead of an object.
        payload = {"user_id": data} if isinstance(data, str) else _as_dict(data)
        user_id = payload.get("user_id")
        if not user_id or not isinstance(user_id, str):
            raise ValidationFailedError("Announce requires a user_id", code="MISSING_FIELDS")

        if self.require_token:
            token = payload.get("token")
            if not token:
                raise AuthenticationError("No token provided", code="NO_TOKEN")
            if decode_access_token(str(token)) != user_id:
                raise ForbiddenError("Token does not belong to the announced user")

        self.presence.announce(user_id, connection)
        await self.presence.deliver(events.presence_changed(user_id, online=True))

    async def send_message(self, connection: Connection, data: dict[str, Any]) -> None:
        """Persist a message from the announced identity and deliver it."""
        sender_id = self._announced_identity(connection)
        receiver_id = _required_text(data, "receiver_id")
        content = data.get("content")
        if content is not None and not isinstance(content, str):
            raise ValidationFailedError("content must be a string")
        message = await run_in_threadpool(self.conversations.send_message, sender_id, receiver_id, content)
        await self.presence.deliver(events.message_delivered(message))

    async def typing(self, connection: Connection, data: dict[str, Any], *, typing: bool) -> None:
        """Relay a typing indicator to the named receiver only."""
        sender_id = self._announced_identity(connection)
        receiver_id = _required_text(data, "receiver_id")
        await self.presence.deliver(events.typing_changed(sender_id, receiver_id, typing=typing))

    async def disconnect(self, connection: Connection) -> None:
        """Release the connection's presence entry and announce the user offline.

        Nothing is broadcast when a newer connection already took over the
        identity.
        """
        user_id = self.presence.remove(connection)
        if user_id is not None:
            await self.presence.deliver(events.presence_changed(user_id, online=False))

    def _announced_identity(self, connection: Connection) -> str:
        if connection.state is not ConnectionState.ANNOUNCED or connection.user_id is None:
            raise ForbiddenError("Announce before sending events", code="NOT_ANNOUNCED")
        return connection.user_id

    async def _send_error(self, connection: Connection, err: AppError, event: str | None = None) -> None:
        logger.debug("Realtime error on %r: %s (%s)", connection, err.message, err.code)
        payload: dict[str, Any] = err.to_payload()
        if event is not None:
            payload["event"] = event
        await connection.send(events.ERROR, payload)


def _as_dict(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationFailedError("Event data must be an object")
    return data


def _required_text(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not value:
        raise ValidationFailedError(f"{field} is required", code="MISSING_FIELDS")
    if not isinstance(value, str):
        raise ValidationFailedError(f"{field} must be a string")
    return value
