"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ErrorResponse, StatusResponse
from .matching import (
    CandidateListResponse,
    CandidateResponse,
    LikeResponse,
    MatchListResponse,
    MatchResponse,
    PublicAccount,
    SwipeRequest,
    UnmatchResponse,
)
from .message import (
    ConversationSummaryResponse,
    MarkReadResponse,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
)
from .user import (
    AccountResponse,
    AccountUpdateRequest,
    AccountUpdateResponse,
    AuthResponse,
    LoginRequest,
    RegisterRequest,
)

__all__ = [
    "AccountResponse", "AccountUpdateRequest", "AccountUpdateResponse",
    "AuthResponse", "LoginRequest", "RegisterRequest",
    "CandidateListResponse", "CandidateResponse", "LikeResponse",
    "MatchListResponse", "MatchResponse", "PublicAccount",
    "SwipeRequest", "UnmatchResponse",
    "ConversationSummaryResponse", "MarkReadResponse", "MessageCreate",
    "MessageListResponse", "MessageResponse",
    "ErrorResponse", "StatusResponse",
]
