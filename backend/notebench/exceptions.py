"""
Notebench Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every failure a request can hit.
Why:   Services raise typed errors; global handlers in main.py translate them
       into one JSON error envelope with the right HTTP status code.
How:   Each exception carries a user-facing message and an optional context dict
       that is logged but never returned to the client.

Exception Hierarchy:
    NotebenchError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NotebenchError(Exception):
    """
    Base exception for all Notebench application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotebenchError):
    """
    Raised when client input fails validation.

    Request-body validation performed by FastAPI is mapped onto this error's
    status code and envelope as well, so clients see 400 for every malformed
    payload.
    """

    status_code = 400
    error_code = "validation_error"

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


class AuthenticationError(NotebenchError):
    """Raised by the authentication gate when no valid caller identity can be resolved."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(NotebenchError):
    """
    Raised when a record exists but belongs to someone else.

    Distinct from NotFoundError on purpose: the caller learns that the id
    exists, but not its contents.
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        resource: str = "resource",
        action: str = "access",
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"You are not allowed to {action} that {resource}."
        ctx = context or {}
        ctx["resource"] = resource
        ctx["action"] = action
        super().__init__(message=message, context=ctx)


class NotFoundError(NotebenchError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert None into this
    error so HTTP concerns stay out of the query code.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"No {resource} found for id ({resource_id})."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(NotebenchError):
    """Raised when a create would violate a uniqueness rule (e.g. duplicate username)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NotebenchError):
    """Raised when a client exceeds the per-IP request rate limit."""

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class DatabaseError(NotebenchError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. The driver error is
    logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
