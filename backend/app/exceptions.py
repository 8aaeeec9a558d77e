"""
Backend — Custom Exception Hierarchy
======================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages, without HTTP concerns leaking
       into the service layer.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, routes and auth dependencies; caught by global handlers.

Exception Hierarchy:
    AppError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── CredentialsError         → 403 Forbidden (bad or expired token)
    ├── PermissionDeniedError    → 403 Forbidden (authenticated, not allowed)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict (e.g. email already registered)
    ├── EmailDeliveryError       → 503 Service Unavailable (SMTP down/disabled)
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only by 4xx handlers)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """
    Raised when client input fails a business rule.

    When:    Wrong email/password at login, inactive account, reusing the
             current password, invalid reset token.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, bad email format) are still
    reported by FastAPI as 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class CredentialsError(AppError):
    """Raised when a bearer token cannot be decoded or names no user."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(AppError):
    """
    Raised when an authenticated user is not allowed to perform an action.

    When:    Non-superuser hitting admin routes, touching another user's items,
             a superuser deleting their own account.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Not enough permissions",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(AppError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    NotFoundError so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(AppError):
    """Raised when a write would violate a uniqueness rule (HTTP 409)."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class EmailDeliveryError(AppError):
    """
    Raised when an email cannot be sent.

    When:    SMTP is not configured (SMTP_HOST / EMAILS_FROM_EMAIL unset), or the
             SMTP server (the mail catcher, locally) refuses or is unreachable.
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "Email service is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AppError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; the SQL error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
