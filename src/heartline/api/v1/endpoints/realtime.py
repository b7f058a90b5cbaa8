# src/heartline/api/v1/endpoints/realtime.py
"""WebSocket channel for presence, typing indicators and message delivery."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from heartline.services.conversations import ConversationService
from heartline.services.presence import Connection
from heartline.services.realtime import RealtimeGateway

from ..dependencies import PresenceDep, SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket, db: SessionDep, presence: PresenceDep) -> None:
    """Accept a client and process its frames until it goes away.

    The connection stays anonymous until it sends ``announce``.
    """
    await websocket.accept()
    connection = Connection(websocket)
    gateway = RealtimeGateway(presence, ConversationService(db))
    logger.debug("Realtime connection %s opened", connection.id)
    try:
        while True:
            raw = await websocket.receive_text()
            await gateway.handle_text(connection, raw)
    except WebSocketDisconnect:
        logger.debug("Realtime connection %s closed by client", connection.id)
    finally:
        await gateway.disconnect(connection)
