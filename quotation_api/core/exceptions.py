"""
Application error taxonomy and global exception handlers.

Every error raised by the auth core or the quotation handlers is an
``AppError`` subclass carrying its HTTP status.  The handlers below turn
them into ``{"detail": ..., "success": false}`` bodies and make sure no
stack trace or internal diagnostic ever reaches the client.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication required."

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Access denied."


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    """Store, hashing or signing failure.

    ``detail`` is for operators: it is logged, never returned.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


def _error_body(message: str) -> dict[str, object]:
    return {"detail": message, "success": False}


async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("%s: %s", exc.message, exc.detail, exc_info=exc.__cause__)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message),
        headers=exc.headers,
    )


async def _http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.info("Rate limit exceeded for %s: %s", request.url.path, exc.detail)
    response = JSONResponse(
        status_code=429,
        content=_error_body(f"Too many requests. Rate limit exceeded: {exc.detail}"),
    )
    limiter = getattr(request.app.state, "limiter", None)
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if limiter is not None and view_rate_limit is not None:
        response = limiter._inject_headers(response, view_rate_limit)
    return response


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    logger.info("Rejected request body: %d validation error(s)", len(errors))
    first = errors[0] if errors else {}
    field = ".".join(p for p in first.get("loc", ())[1:] if isinstance(p, str))
    message = f"Invalid request body: {field}" if field else "Invalid request body"
    return JSONResponse(status_code=400, content=_error_body(message))


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content=_error_body("Database constraint violation"),
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal database error"),
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
