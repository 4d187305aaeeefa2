"""Centralized exception handling.

Every error the API returns has the same shape: ``{"message": "..."}``.
Internal detail (tracebacks, driver codes) is logged, never returned.

Learn: Services raise these domain errors; the handlers registered in
main.py turn them into JSON responses. Store-level exceptions are
reclassified at the service boundary by ``store_errors()`` so callers
never see raw SQLAlchemy types.
"""

from contextlib import contextmanager
from typing import Iterator

import pydantic
import structlog
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, SQLAlchemyError

logger = structlog.get_logger()

INTERNAL_SERVER_ERROR = "Internal server error"
VALIDATION_ERROR = "Validation error"
RESOURCE_NOT_FOUND = "Resource not found"


# ─── Exception classes ──────────────────────────────────


class WardrobeError(Exception):
    """Base class for application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(WardrobeError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = VALIDATION_ERROR


class AuthenticationError(WardrobeError):
    """Bad credentials, or a missing/invalid token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authorized"


class AuthorizationError(WardrobeError):
    """Authenticated, but not the owner of the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFoundError(WardrobeError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = RESOURCE_NOT_FOUND


class ConflictError(WardrobeError):
    """Duplicate value for a unique field."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(WardrobeError):
    """Unexpected store or external service failure."""


# Session protocol errors

class MissingCredentials(ValidationError):
    default_message = "Email and password are required"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid credentials"


class NoRefreshToken(AuthenticationError):
    default_message = "No refresh token provided"


class InvalidRefreshToken(AuthenticationError):
    default_message = "Invalid refresh token"


# Clothing errors

class MissingFields(ValidationError):
    default_message = "Name, category, and color are required"


class ImageServiceError(InternalError):
    """The image host rejected or failed an upload/destroy call."""


# ─── Store error reclassification ───────────────────────


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Reclassify store failures raised inside the block.

    - schema/validation failure → ValidationError (400)
    - malformed identifier (ValueError) → NotFoundError (404)
    - any other store error, or the database being unreachable
      (raw OSError from the driver) → InternalError (500)

    Domain errors raised inside the block pass through untouched.
    """
    try:
        yield
    except WardrobeError:
        raise
    except (pydantic.ValidationError, DataError) as e:
        logger.warning("store.validation_failed", action=action, error=str(e))
        raise ValidationError() from e
    except ValueError as e:
        logger.info("store.malformed_identifier", action=action, error=str(e))
        raise NotFoundError() from e
    except (SQLAlchemyError, OSError) as e:
        logger.error("store.operation_failed", action=action, error=str(e))
        raise InternalError() from e


# ─── Exception handlers ─────────────────────────────────


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def wardrobe_exception_handler(request: Request, exc: WardrobeError) -> JSONResponse:
    """Render domain errors as ``{"message": ...}``."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request.failed",
        error=type(exc).__name__,
        status=exc.status_code,
        path=request.url.path,
        method=request.method,
    )
    return _message(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Keep Starlette/FastAPI HTTP errors (404 route, 405) in the same shape."""
    return _message(exc.status_code, str(exc.detail))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors: 400, not FastAPI's 422."""
    logger.info("request.invalid", path=request.url.path, errors=len(exc.errors()))
    return _message(status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected exceptions: full traceback to the log, generic message out."""
    logger.error(
        "request.unhandled_exception",
        error=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)
