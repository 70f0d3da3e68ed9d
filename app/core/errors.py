"""
Custom exception hierarchy for the Calmwell API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

No-data conditions (no entries, no evaluations) are never errors: the
aggregation services return zero / placeholder values for them.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class CalmwellException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UserNotReadyError(CalmwellException):
    """Current user identity has not been established yet (startup race)."""
    http_status = status.HTTP_409_CONFLICT
    code = "USER_NOT_READY"

    def __init__(self, waited_seconds: float):
        super().__init__(
            message="No active user session yet. Set one with PUT /session and retry.",
            details={"waited_seconds": waited_seconds},
        )


class AchievementNotFoundError(CalmwellException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ACHIEVEMENT_NOT_FOUND"

    def __init__(self, achievement_id: str):
        super().__init__(
            message=f"Unknown achievement '{achievement_id}'.",
            details={"achievement_id": achievement_id},
        )


class InvalidEvaluationError(CalmwellException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_EVALUATION"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details)


class InvalidEntryError(CalmwellException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_ENTRY"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details)


class ChatLimitReachedError(CalmwellException):
    """The user has used up today's chat messages."""
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "CHAT_LIMIT_REACHED"

    def __init__(self, daily_limit: int):
        super().__init__(
            message=f"Daily limit of {daily_limit} chat messages reached. Try again tomorrow.",
            details={"daily_limit": daily_limit, "remaining": 0},
        )


class ChatTransportError(CalmwellException):
    """
    Chat completion failed (missing key, network, API status, empty reply).
    Recovered by ChatService with a canned reply; never reaches a client.
    """
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "CHAT_TRANSPORT_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            details={"status_code": status_code} if status_code else {},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def calmwell_exception_handler(request: Request, exc: CalmwellException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query")),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
