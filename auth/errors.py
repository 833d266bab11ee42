"""
Error taxonomy for the auth subsystem.

Every error carries the user-facing ``message`` and the HTTP status it maps
to; ``api/errors.py`` turns them into JSON responses.
"""

from __future__ import annotations

from typing import List, Optional


class AuthError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[List[str]] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors
        self.detail = detail


class ValidationError(AuthError):
    """One or more field violations (``errors`` lists all of them)."""

    status_code = 400

    def __init__(self, message: str = "Validation error", errors: Optional[List[str]] = None) -> None:
        super().__init__(message, errors=errors)


class DuplicateEmail(AuthError):
    status_code = 400

    def __init__(self, message: str = "Email already registered. Please use a different email.") -> None:
        super().__init__(message)


class InvalidCredentials(AuthError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class NoToken(AuthError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("No token provided. Please log in.")


class TokenExpired(AuthError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Token has expired. Please log in again.")


class TokenInvalid(AuthError):
    status_code = 401

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__("Invalid token. Please log in again.", detail=detail)


class NotFound(AuthError):
    status_code = 404

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class HashingError(AuthError):
    status_code = 500


class UnexpectedError(AuthError):
    status_code = 500
