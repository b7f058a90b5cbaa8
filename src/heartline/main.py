"""Main entry point for the Heartline application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from heartline.api.v1 import (
    auth_router,
    matching_router,
    messages_router,
    realtime_router,
    users_router,
)
from heartline.core.errors import AppError
from heartline.core.logging import configure_logging, request_logging_middleware
from heartline.core.settings import settings
from heartline.services.presence import PresenceRegistry

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Heartline API",
    description="Swipe matching and messaging for dating apps",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)
app.middleware("http")(request_logging_middleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(matching_router, prefix="/api/v1")
app.include_router(messages_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: list[dict[str, Any]] = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    only_missing = bool(errors) and all(error["type"] == "missing" for error in errors)
    if only_missing:
        fields = sorted({error["loc"][-1] for error in errors if error["loc"]})
        detail = f"Missing required fields: {', '.join(fields)}"
        code = "MISSING_FIELDS"
    else:
        detail = "Validation error"
        code = "VALIDATION_ERROR"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "code": code, "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content: dict[str, Any] = {"detail": "Server error", "code": "SERVER_ERROR"}
    if settings.debug:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.on_event("startup")
async def on_startup() -> None:
    app.state.presence = PresenceRegistry()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    presence: PresenceRegistry | None = getattr(app.state, "presence", None)
    if presence is not None:
        presence.clear()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Heartline API",
        "version": settings.app_version,
        "description": "Swipe matching and messaging for dating apps",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("heartline.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
