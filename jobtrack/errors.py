"""
JobTrack - Error taxonomy and the centralized error boundary.

Handlers and stores raise the typed errors below and never catch them;
`register_exception_handlers` converts them into `{"msg": ...}` responses.
"""
import logging
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger("jobtrack.errors")

GENERIC_ERROR_MESSAGE = "Something went wrong, try again later"


class JobTrackError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(JobTrackError):
    """One or more field constraints were violated."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__(join_messages(self.messages))


class ConflictError(JobTrackError):
    """A unique field already holds the submitted value."""
    # The client contract reports duplicates as 400, not 409.
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str):
        self.field = field
        super().__init__(duplicate_message(field))


class AuthenticationError(JobTrackError):
    """Missing, malformed, expired or forged token, or bad credentials."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(JobTrackError):
    """The resource does not exist or is not owned by the caller."""
    status_code = status.HTTP_404_NOT_FOUND


def join_messages(messages: Iterable[str]) -> str:
    return ", ".join(messages)


def duplicate_message(field: str) -> str:
    return f"Duplicate value entered for {field} please choose another value"


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"msg": message}, headers=headers)


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


async def jobtrack_error_handler(request: Request, exc: JobTrackError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    logger.debug(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return _error_response(exc.status_code, exc.message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten FastAPI's structured validation errors into one comma-joined message."""
    messages = []
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        text = error.get("msg", "is invalid").replace(",", ";")
        messages.append(f"{field}: {text}")
    return _error_response(status.HTTP_400_BAD_REQUEST, join_messages(messages) or "Invalid request")


def is_duplicate_email(exc: IntegrityError) -> bool:
    """True if the violated constraint is the unique index on users.email."""
    detail = str(exc.orig).lower()
    return "users.email" in detail or "ix_users_email" in detail


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    if is_duplicate_email(exc):
        logger.warning(f"Duplicate email on {request.method} {request.url.path}")
        return _error_response(status.HTTP_400_BAD_REQUEST, duplicate_message("email"))
    return await unhandled_error_handler(request, exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error boundary to the application."""
    app.add_exception_handler(JobTrackError, jobtrack_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
