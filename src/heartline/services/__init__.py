# src/heartline/services/__init__.py
"""Business logic services for the Heartline application."""

from .conversations import ConversationService, conversation_id
from .matching import MatchEngine
from .presence import Connection, PresenceRegistry
from .realtime import RealtimeGateway

__all__ = [
    "Connection",
    "ConversationService",
    "MatchEngine",
    "PresenceRegistry",
    "RealtimeGateway",
    "conversation_id",
]
