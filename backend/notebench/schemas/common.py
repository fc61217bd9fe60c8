"""
Notebench Backend — Shared Response Schemas
=============================================

What:  Envelopes used by every resource: the error body, the delete
       confirmation, and the health report.
Why:   Clients get one error shape for every failure (validation, auth,
       ownership, driver errors) instead of a mix of raw driver objects and
       ad-hoc messages.
"""

import uuid
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "forbidden",
            "message": "You are not allowed to update that note.",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class DeleteResponse(BaseModel):
    """Confirmation returned by every DELETE endpoint."""
    message: str = Field(description="Human-readable confirmation")
    id: uuid.UUID = Field(description="Identifier of the deleted record")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# Titles and names are trimmed before the length check, so "   " is rejected.
TrimmedTitle = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)
]
