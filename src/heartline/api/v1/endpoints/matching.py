# src/heartline/api/v1/endpoints/matching.py
"""Swipe, candidate and match endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from starlette.concurrency import run_in_threadpool

from heartline.models import Account, Match
from heartline.schemas.common import ErrorResponse, StatusResponse
from heartline.schemas.matching import (
    CandidateListResponse,
    CandidateResponse,
    LikeResponse,
    MatchListResponse,
    MatchResponse,
    PublicAccount,
    SwipeRequest,
    UnmatchResponse,
)
from heartline.services.matching import Candidate

from ..dependencies import CurrentUserDep, MatchEngineDep, PresenceDep

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/matching",
    tags=["matching"],
    responses={401: {"model": ErrorResponse}},
)


def _public(account: Account) -> PublicAccount:
    return PublicAccount.model_validate(account.public_fields())


def _serialize_candidate(candidate: Candidate) -> CandidateResponse:
    return CandidateResponse(
        **candidate.account.public_fields(),
        location=candidate.profile.location,
        interests=list(candidate.profile.interests or []),
    )


def _serialize_match(match: Match, counterpart: Account) -> MatchResponse:
    return MatchResponse(match_id=match.id, user=_public(counterpart), matched_at=match.matched_at)


@router.get("/profiles", response_model=CandidateListResponse)
def list_profiles(
    current_user: CurrentUserDep,
    engine: MatchEngineDep,
    limit: int | None = Query(None, ge=1, description="Maximum number of profiles to return"),
) -> CandidateListResponse:
    """Profiles the caller has not liked, passed or matched yet."""
    candidates = engine.list_candidates(current_user.id, limit)
    return CandidateListResponse(profiles=[_serialize_candidate(c) for c in candidates])


@router.post("/like", response_model=LikeResponse, responses={400: {"model": ErrorResponse}})
def like_profile(
    payload: SwipeRequest,
    current_user: CurrentUserDep,
    engine: MatchEngineDep,
) -> LikeResponse:
    outcome = engine.record_like(current_user.id, payload.profile_id)
    if not outcome.matched:
        return LikeResponse(message="Profile liked", is_match=False)

    match = None
    if outcome.match is not None and outcome.counterpart is not None:
        match = _serialize_match(outcome.match, outcome.counterpart)
    return LikeResponse(message="It's a match!", is_match=True, match=match)


@router.post("/pass", response_model=StatusResponse, responses={400: {"model": ErrorResponse}})
def pass_profile(
    payload: SwipeRequest,
    current_user: CurrentUserDep,
    engine: MatchEngineDep,
) -> StatusResponse:
    engine.record_pass(current_user.id, payload.profile_id)
    return StatusResponse(message="Profile passed")


@router.get("/matches", response_model=MatchListResponse)
def list_matches(current_user: CurrentUserDep, engine: MatchEngineDep) -> MatchListResponse:
    """Counterparts of every active match, most recent first."""
    summaries = engine.list_matches(current_user.id)
    return MatchListResponse(
        matches=[_serialize_match(summary.match, summary.counterpart) for summary in summaries]
    )


@router.delete("/matches/{user_id}", response_model=UnmatchResponse)
async def unmatch(
    user_id: str,
    current_user: CurrentUserDep,
    engine: MatchEngineDep,
    presence: PresenceDep,
) -> UnmatchResponse:
    """Dissolve a match, delete its conversation and notify the counterpart."""
    outcome = await run_in_threadpool(engine.unmatch, current_user.id, user_id)
    for event in outcome.events:
        await presence.deliver(event)
    return UnmatchResponse(
        message="Unmatched successfully",
        was_matched=outcome.was_matched,
        messages_deleted=outcome.messages_deleted,
    )
