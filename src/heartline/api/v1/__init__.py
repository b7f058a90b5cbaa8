"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    matching_router,
    messages_router,
    realtime_router,
    users_router,
)

__all__ = [
    "auth_router",
    "matching_router",
    "messages_router",
    "realtime_router",
    "users_router",
]
