"""Shared error types and exception handlers."""

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ImageServiceError,
    InternalError,
    InvalidCredentials,
    InvalidRefreshToken,
    MissingCredentials,
    MissingFields,
    NoRefreshToken,
    NotFoundError,
    ValidationError,
    WardrobeError,
    store_errors,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "ImageServiceError",
    "InternalError",
    "InvalidCredentials",
    "InvalidRefreshToken",
    "MissingCredentials",
    "MissingFields",
    "NoRefreshToken",
    "NotFoundError",
    "ValidationError",
    "WardrobeError",
    "store_errors",
]
