"""Errors raised by tenancy decisions and rendered as the JSON error envelope.

Capability probes in the tenancy resolver never raise these; they answer
``False``. Precondition lookups (role, timezone, activation state) raise
``NotFoundException`` when the caller skipped the membership check.
"""

from __future__ import annotations


class AppException(Exception):
    """Base for every error the API turns into ``{"error": {...}}``.

    ``code`` and ``status_code`` are fixed per subclass; ``message`` and the
    optional per-field ``details`` describe the concrete failure.
    """

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []

    def envelope(self, request_id: str) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "requestId": request_id,
            }
        }


class NotFoundException(AppException):
    """Unknown company, user or campaign, or a lookup without a membership row."""

    code = "NOT_FOUND"
    status_code = 404


class ConflictException(AppException):
    """A second membership row for the same user and company."""

    code = "CONFLICT"
    status_code = 409


class ForbiddenException(AppException):
    """Authenticated, but lacking the site-admin, company-admin or grant needed."""

    code = "FORBIDDEN"
    status_code = 403


class UnauthorizedException(AppException):
    code = "UNAUTHORIZED"
    status_code = 401


class ValidationException(AppException):
    """Input outside an allowed set, e.g. a timezone or an active-company id."""

    code = "VALIDATION_ERROR"
    status_code = 422


class BusinessRuleException(AppException):
    """Membership lifecycle step taken out of order, such as completing twice."""

    code = "MEMBERSHIP_STATE_INVALID"
    status_code = 422
