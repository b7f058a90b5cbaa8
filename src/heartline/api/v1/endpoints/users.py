# src/heartline/api/v1/endpoints/users.py
"""Endpoints for the caller's own account."""

from __future__ import annotations

from fastapi import APIRouter

from heartline.schemas.user import AccountResponse, AccountUpdateRequest, AccountUpdateResponse
from heartline.services import accounts

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=AccountResponse)
async def read_me(current_user: CurrentUserDep) -> AccountResponse:
    return AccountResponse.model_validate(current_user)


@router.patch("/me", response_model=AccountUpdateResponse)
def update_me(
    payload: AccountUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AccountUpdateResponse:
    """Update account fields; a new birthday recomputes the age."""
    account = accounts.update_account(db, current_user, payload)
    return AccountUpdateResponse(
        message="Profile updated successfully",
        user=AccountResponse.model_validate(account),
    )
