# src/heartline/models/__init__.py
"""SQLAlchemy models for the Heartline application."""

from .account import Account
from .match import Match
from .message import Message
from .profile import Profile, ProfileEdge

__all__ = [
    "Account",
    "Match",
    "Message",
    "Profile", "ProfileEdge",
]
