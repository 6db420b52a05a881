"""
Error taxonomy for the account service.

Every error carries the HTTP status it maps to and a caller-safe
``message``.  ``main.create_app`` registers a single handler that renders
any ``AccountError`` as ``{"message": ...}``.
"""

from __future__ import annotations


class AccountError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountError):
    """Malformed or forbidden input."""

    status_code = 400


class ConflictError(AccountError):
    """Username or email already taken."""

    status_code = 400


class Unauthorized(AccountError):
    status_code = 401


class NotFoundError(AccountError):
    status_code = 404


class InternalError(AccountError):
    """Store / hashing / signing failure. Detail stays in the server log."""

    status_code = 500

    def __init__(self, message: str = "Server error") -> None:
        super().__init__(message)
