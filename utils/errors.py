"""
Error taxonomy shared by the token core and the HTTP layer.

Each error carries an HTTP-like status code so the transport can turn it
into the failure envelope without knowing where it was raised.
"""
from __future__ import annotations

from typing import List, Optional


class ApiError(Exception):
    """Base class for errors that are safe to report to the caller."""

    status_code: int = 400

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors or []


class ValidationError(ApiError):
    """Missing or malformed request fields (400)."""
    status_code = 400


class UnauthorizedError(ApiError):
    """Bad credentials or a missing/invalid/stale token (401)."""
    status_code = 401


class InvalidTokenError(UnauthorizedError):
    """Token signature, expiry, type or claims check failed."""


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class InternalError(ApiError):
    """Unexpected failure; the original cause is chained, never shown."""
    status_code = 500

    def __init__(self, message: str = "Something went wrong", errors: Optional[List] = None):
        super().__init__(message, errors=errors)
