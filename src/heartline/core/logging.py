"""Logging configuration and request logging middleware."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable
from logging.config import dictConfig

from fastapi import Request, Response

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("heartline.request")


def configure_logging(level: str = "INFO") -> None:
    """Install a console handler on the root logger."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": LOG_FORMAT,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "level": level.upper(),
                "handlers": ["console"],
            },
        }
    )


async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every request with an id and log its outcome."""
    request_id = uuid.uuid4().hex
    logger.info("[REQ %s] %s %s", request_id, request.method, request.url.path)

    try:
        response = await call_next(request)
    except Exception:
        logger.exception("[REQ %s] Unhandled error", request_id)
        raise

    logger.info("[REQ %s] %s", request_id, response.status_code)
    response.headers["X-Request-ID"] = request_id
    return response
