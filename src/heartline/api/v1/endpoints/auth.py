# src/heartline/api/v1/endpoints/auth.py
"""Authentication endpoints for the Heartline API."""

from __future__ import annotations

from fastapi import APIRouter, status

from heartline.core.security import create_access_token
from heartline.schemas.user import AccountResponse, AuthResponse, LoginRequest, RegisterRequest
from heartline.services import accounts

from ..dependencies import SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Open an account and log it in immediately."""
    account = accounts.register_account(db, payload)
    return AuthResponse(
        message="User registered successfully",
        access_token=create_access_token(account.id),
        token_type="bearer",
        user=AccountResponse.model_validate(account),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange email and password for an access token."""
    account = accounts.authenticate(db, payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        access_token=create_access_token(account.id),
        token_type="bearer",
        user=AccountResponse.model_validate(account),
    )
