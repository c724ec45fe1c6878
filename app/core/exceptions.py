"""
Access error taxonomy and global exception handlers.

Every authorization failure is one of the ``AccessError`` subclasses below.
Each carries the externally stable outcome code and a generic public
message; the detailed cause is only ever logged.
"""

from __future__ import annotations

import enum
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class OutcomeCode(str, enum.Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# ── Taxonomy ────────────────────────────────────────────────────────
class AccessError(Exception):
    """Base class for every failure an authorization check can produce."""

    code: OutcomeCode = OutcomeCode.INTERNAL_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "UNEXPECTED_ERROR"
    public_message: str = "An unexpected internal error occurred."
    log_level: int = logging.ERROR


class TokenMalformedError(AccessError):
    code = OutcomeCode.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "INVALID_TOKEN"
    public_message = "The token provided is invalid."
    log_level = logging.INFO


class TokenExpiredError(AccessError):
    code = OutcomeCode.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "TOKEN_EXPIRED"
    public_message = "The authentication token has expired. Please log in again."
    log_level = logging.INFO

    def __init__(self, message: str = "token expired") -> None:
        super().__init__(message)


class InvalidCredentialsError(AccessError):
    code = OutcomeCode.UNAUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "INVALID_CREDENTIALS"
    public_message = "Invalid credentials."
    log_level = logging.INFO

    def __init__(self, message: str = "invalid credentials") -> None:
        super().__init__(message)


class PermissionDeniedError(AccessError):
    NO_ROLES = "no roles"
    NO_MATCHING_PERMISSION = "no matching permission"

    code = OutcomeCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    reason = "PERMISSION_DENIED"
    public_message = "Access denied."
    log_level = logging.INFO

    def __init__(self, denial: str) -> None:
        self.denial = denial
        super().__init__(f"permission denied: {denial}")


class NotFoundError(AccessError):
    code = OutcomeCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    reason = "RESOURCE_NOT_FOUND"
    public_message = "The requested resource does not exist."
    log_level = logging.INFO

    def __init__(self, resource: str, key: object = None) -> None:
        self.resource = resource
        self.key = key
        detail = f"{resource} not found" if key is None else f"{resource} not found: {key}"
        super().__init__(detail)


class DataAccessError(AccessError):
    reason = "DATABASE_ACCESS_ERROR"
    public_message = "An internal error occurred while accessing the database."

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"data access error: {cause}")


# ── Handlers ────────────────────────────────────────────────────────
async def _access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    logger.log(
        exc.log_level,
        "%s %s -> %s (%s): %s",
        request.method,
        request.url.path,
        exc.code.value,
        exc.reason,
        exc,
        exc_info=exc if exc.code is OutcomeCode.INTERNAL_ERROR else None,
    )
    headers = None
    if exc.code is OutcomeCode.UNAUTHENTICATED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.public_message,
            "code": exc.code.value,
            "reason": exc.reason,
            "success": False,
        },
        headers=headers,
    )


async def _http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "success": False},
        headers=getattr(exc, "headers", None),
    )


async def _integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content={"detail": "Database constraint violation", "success": False},
    )


async def _sqlalchemy_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal database error", "success": False},
    )


async def _generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "success": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AccessError, _access_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
