from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DuplicateSessionError(DomainError):
    """Raised when a start is attempted while the user already has a session."""


class InvalidTransitionError(DomainError):
    """Raised when an event is not allowed from the session's current status."""


class ConflictError(DomainError):
    """Raised when the stored record changed under the caller (refetch and retry)."""


class SessionMismatchError(ConflictError):
    """Raised when a command references a session that is not the user's open session."""


class StoreError(DomainError):
    """Raised when the persistence layer fails.

    ``kind`` tells callers what went wrong without inspecting driver errors:
    ``not_found``, ``permission``, ``schema``, ``integrity``, ``network`` or
    ``unknown``.
    """

    def __init__(self, message: str, *, kind: str = "unknown", errno: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.errno = errno


class NotFoundError(StoreError):
    def __init__(self, message: str, *, errno: Optional[int] = None):
        super().__init__(message, kind="not_found", errno=errno)


class StorePermissionError(StoreError):
    def __init__(self, message: str, *, errno: Optional[int] = None):
        super().__init__(message, kind="permission", errno=errno)
