"""Domain exceptions and standardized error responses across all API endpoints."""
from typing import Any

import sentry_sdk
import structlog
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = structlog.get_logger()


class ErrorResponse(BaseModel):
    """Standard error envelope returned by all API error handlers."""

    error: str
    message: str
    detail: Any = None
    request_id: str = "unknown"


# ── Domain exceptions ─────────────────────────────────────────────────────────


class DomainError(Exception):
    """Base for errors raised by the matching core. Never retried."""

    status_code = 400
    error = "domain_error"

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(DomainError, ValueError):
    """Bad input or policy violation (cooldown, refresh limit, bad transition)."""

    status_code = 400
    error = "validation_error"


class NotFoundError(DomainError, LookupError):
    status_code = 404
    error = "not_found"


class PermissionDeniedError(DomainError, PermissionError):
    status_code = 403
    error = "forbidden"


class ConflictError(DomainError):
    status_code = 409
    error = "conflict"


class DuplicateMatchError(ConflictError):
    """A (funding request, founder, investor) match already exists."""

    error = "duplicate_match"


class DependencyError(DomainError):
    """Persistence layer failed; raised after best-effort compensation."""

    status_code = 503
    error = "dependency_error"


# ── Handlers ──────────────────────────────────────────────────────────────────


async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain exceptions onto the standard JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    if isinstance(exc, DependencyError):
        logger.error(
            "dependency_failure",
            error=exc.message,
            cause=repr(exc.__cause__),
            path=request.url.path,
            request_id=request_id,
        )
        sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.error,
            message=exc.message,
            detail=exc.detail if exc.detail is not None else exc.message,
            request_id=request_id,
        ).model_dump(mode="json"),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a consistent JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        request_id=request_id,
    )

    sentry_sdk.capture_exception(exc)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="internal_server_error",
            message="An unexpected error occurred. Our team has been notified.",
            request_id=request_id,
        ).model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Standardize HTTPException responses into the same JSON envelope."""
    request_id = request.headers.get("x-request-id", "unknown")

    if isinstance(exc.detail, dict):
        error = exc.detail.get("error", f"http_{exc.status_code}")
        message = exc.detail.get("message", str(exc.detail))
        detail: Any = exc.detail.get("detail")
    else:
        error = f"http_{exc.status_code}"
        message = str(exc.detail)
        detail = exc.detail

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error, message=message, detail=detail, request_id=request_id
        ).model_dump(mode="json"),
        headers=dict(exc.headers or {}),
    )
