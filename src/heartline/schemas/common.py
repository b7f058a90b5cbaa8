"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Stable machine-readable error code")
    errors: list[dict[str, object]] | None = Field(
        None,
        description="Per-field details for request validation failures",
    )


class StatusResponse(BaseModel):
    """Acknowledgement for endpoints that only report success."""

    message: str
