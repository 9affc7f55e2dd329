"""
Application error hierarchy.

Every error carries the HTTP status it maps to; the handlers registered in
``main.py`` turn them into the ``{"success": false, "error": ...}`` envelope.

Usage:
    from app.core.exceptions import NotFoundError

    note = note_crud.get(db, id=note_id, tenant_id=context.tenant_id)
    if not note:
        raise NotFoundError("Note not found")
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all NotesRole errors.

    Catch ``AppError`` to handle any error raised deliberately by the
    service layer.
    """

    status_code: int = 500

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(AppError):
    """Missing, malformed, expired or badly signed token, or bad credentials."""

    status_code = 401


class AuthorizationError(AppError):
    """Role or ownership check failed."""

    status_code = 403


class ValidationError(AppError):
    """Malformed input or an operation that is invalid in the current state."""

    status_code = 400


class NotFoundError(AppError):
    """
    Row absent in the caller's tenant scope.

    Raised identically for "does not exist" and "exists in another tenant".
    """

    status_code = 404


class LimitExceededError(AppError):
    """Subscription plan cap reached."""

    status_code = 403


class ConflictError(AppError):
    """Duplicate email, duplicate invitation, or a lost accept race."""

    status_code = 409


class InvitationExpiredError(AppError):
    """Invitation token used after its expiry."""

    status_code = 410


class InternalError(AppError):
    """Unexpected datastore failure while writing."""

    status_code = 500
