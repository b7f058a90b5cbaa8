"""Shared API dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from heartline.core.errors import AuthenticationError
from heartline.core.security import decode_access_token
from heartline.db.session import get_db
from heartline.models import Account
from heartline.services.conversations import ConversationService
from heartline.services.matching import MatchEngine
from heartline.services.presence import PresenceRegistry, get_presence

# Missing credentials are reported through the domain error handler.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
PresenceDep = Annotated[PresenceRegistry, Depends(get_presence)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> Account:
    """Get the current authenticated account from the bearer token.

    Raises:
        AuthenticationError: If the token is absent, invalid or expired, or
            names an account that no longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token provided", code="NO_TOKEN")

    account_id = decode_access_token(credentials.credentials)
    account = db.get(Account, account_id)
    if account is None:
        raise AuthenticationError("User not found", code="USER_NOT_FOUND")
    return account


# Type alias for current user dependency
CurrentUserDep = Annotated[Account, Depends(get_current_user)]


def get_match_engine(db: SessionDep) -> MatchEngine:
    return MatchEngine(db)


def get_conversation_service(db: SessionDep) -> ConversationService:
    return ConversationService(db)


MatchEngineDep = Annotated[MatchEngine, Depends(get_match_engine)]
ConversationServiceDep = Annotated[ConversationService, Depends(get_conversation_service)]
