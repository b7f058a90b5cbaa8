"""Pydantic schemas for swiping and matches."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SwipeRequest(BaseModel):
    """Target of a like or a pass."""

    profile_id: str = Field(..., min_length=1, description="Account id of the swiped profile")


class PublicAccount(BaseModel):
    """Fields of another account visible to the caller."""

    id: str
    name: str
    age: int
    gender: str
    bio: str = ""
    photo_url: str | None = None


class CandidateResponse(PublicAccount):
    """A profile the caller has not swiped on yet."""

    location: str | None = None
    interests: list[str] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """An active match from the caller's side."""

    match_id: int
    user: PublicAccount
    matched_at: datetime


class LikeResponse(BaseModel):
    message: str
    is_match: bool
    match: MatchResponse | None = None


class UnmatchResponse(BaseModel):
    message: str
    was_matched: bool
    messages_deleted: int


class CandidateListResponse(BaseModel):
    profiles: list[CandidateResponse]


class MatchListResponse(BaseModel):
    matches: list[MatchResponse]
