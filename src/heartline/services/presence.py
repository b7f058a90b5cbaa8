"""In-process presence map and best-effort real-time delivery.

The registry maps an account id to the connection that most recently announced
it. It lives for the lifetime of the server process: it is created at startup,
cleared at shutdown and never persisted, so clients must re-announce after a
restart. Delivery is fire-and-forget; events for absent identities are dropped.
"""

from __future__ import annotations

import enum
import itertools
import logging
from typing import Any, Protocol

from fastapi import WebSocketDisconnect
from fastapi.requests import HTTPConnection

from .events import RealtimeEvent

logger = logging.getLogger(__name__)

_CONNECTION_IDS = itertools.count(1)


class JsonSocket(Protocol):
    """Minimal transport interface a connection needs."""

    async def send_json(self, data: Any) -> None: ...


class ConnectionState(enum.Enum):
    CONNECTED = "connected"
    ANNOUNCED = "announced"
    DISCONNECTED = "disconnected"


class Connection:
    """A live client connection, optionally bound to an account id."""

    def __init__(self, socket: JsonSocket) -> None:
        self.id = next(_CONNECTION_IDS)
        self.socket = socket
        self.user_id: str | None = None
        self.state = ConnectionState.CONNECTED

    def __repr__(self) -> str:
        return f"Connection(id={self.id}, user_id={self.user_id!r}, state={self.state.value})"

    async def send(self, event: str, payload: dict[str, Any]) -> bool:
        """Write one event frame; return False if the transport is gone."""
        if self.state is ConnectionState.DISCONNECTED:
            return False
        try:
            await self.socket.send_json({"event": event, "data": payload})
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            logger.warning("Dropping %s for %r: %s", event, self, exc)
            return False
        return True


class PresenceRegistry:
    """Maps account ids to their currently announced connection."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._connections)

    def announce(self, user_id: str, connection: Connection) -> Connection | None:
        """Bind ``connection`` to ``user_id``; last announce wins.

        Returns the connection previously registered for the identity, which is
        left orphaned without notice.
        """
        if connection.user_id is not None and connection.user_id != user_id:
            # Re-announcing under another identity releases the old entry first.
            self.remove(connection)
        previous = self._connections.get(user_id)
        self._connections[user_id] = connection
        connection.user_id = user_id
        connection.state = ConnectionState.ANNOUNCED
        logger.info("User %s announced on connection %s", user_id, connection.id)
        if previous is not None and previous is not connection:
            logger.debug("Connection %s for %s superseded", previous.id, user_id)
            return previous
        return None

    def lookup(self, user_id: str) -> Connection | None:
        return self._connections.get(user_id)

    def is_online(self, user_id: str) -> bool:
        return user_id in self._connections

    def online_user_ids(self) -> list[str]:
        return list(self._connections)

    def remove(self, connection: Connection) -> str | None:
        """Drop the entry owned by ``connection``.

        The entry is only deleted if it still points at this exact connection,
        so a stale connection disconnecting cannot evict a newer one. Returns
        the identity that went offline, or None.
        """
        user_id = connection.user_id
        connection.state = ConnectionState.DISCONNECTED
        if user_id is None:
            return None
        if self._connections.get(user_id) is not connection:
            return None
        del self._connections[user_id]
        logger.info("User %s disconnected from connection %s", user_id, connection.id)
        return user_id

    async def emit_to(self, user_id: str, event: str, payload: dict[str, Any]) -> bool:
        """Send to one identity if connected; silently drop otherwise."""
        connection = self._connections.get(user_id)
        if connection is None:
            return False
        return await connection.send(event, payload)

    async def broadcast(self, event: str, payload: dict[str, Any]) -> int:
        """Send to every announced connection; return how many accepted it."""
        delivered = 0
        for connection in list(self._connections.values()):
            if await connection.send(event, payload):
                delivered += 1
        return delivered

    async def deliver(self, event: RealtimeEvent) -> int:
        """Route a described event to its audience."""
        if event.is_broadcast:
            return await self.broadcast(event.name, event.payload)
        assert event.recipient_id is not None
        return int(await self.emit_to(event.recipient_id, event.name, event.payload))

    def clear(self) -> None:
        for connection in self._connections.values():
            connection.state = ConnectionState.DISCONNECTED
        self._connections.clear()


def get_presence(conn: HTTPConnection) -> PresenceRegistry:
    """Return the registry created at application startup."""
    presence: PresenceRegistry | None = getattr(conn.app.state, "presence", None)
    if presence is None:
        presence = PresenceRegistry()
        conn.app.state.presence = presence
    return presence


__all__ = [
    "Connection",
    "ConnectionState",
    "PresenceRegistry",
    "get_presence",
]
