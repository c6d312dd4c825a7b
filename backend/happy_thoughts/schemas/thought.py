"""
Happy Thoughts Backend — Pydantic Request/Response Schemas
===========================================================

What:  Pydantic models defining the API contract for thoughts.
Why:   Input validation, serialization, and OpenAPI doc generation.
How:   FastAPI validates request bodies against these models and serializes
       responses through them (by alias, so `created_at` goes out as `createdAt`).

Message rules (shared by create, patch and replace):
    - required
    - 5 to 140 characters
    - no digit characters (0-9)

Request models accept both camelCase and snake_case field names.
"""

import re
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from happy_thoughts.models.thought import MESSAGE_MAX_LENGTH, MESSAGE_MIN_LENGTH

_DIGIT = re.compile(r"[0-9]")


def check_message(value: Optional[str]) -> str:
    """Rejects null and any message containing a digit."""
    if value is None:
        raise ValueError("Message is required")
    if _DIGIT.search(value):
        raise ValueError("Numbers are not allowed")
    return value


def check_present(value: Any) -> Any:
    """Optional patch fields may be omitted, but not sent as null."""
    if value is None:
        raise ValueError("Field may not be null")
    return value


class _ThoughtModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class ThoughtCreate(_ThoughtModel):
    """Body of POST /thoughts. Only the message is client-controlled."""

    message: str = Field(
        min_length=MESSAGE_MIN_LENGTH,
        max_length=MESSAGE_MAX_LENGTH,
        description="Thought text, 5-140 characters, no digits",
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        return check_message(v)


class ThoughtPatch(_ThoughtModel):
    """
    Body of PATCH /thoughts/{id}.

    Only fields the client actually sends are merged (see `exclude_unset`
    in the service), so `{"hearts": 5}` leaves message and createdAt alone.
    """

    message: Optional[str] = Field(
        default=None,
        min_length=MESSAGE_MIN_LENGTH,
        max_length=MESSAGE_MAX_LENGTH,
    )
    hearts: Optional[int] = Field(default=None, ge=0)
    created_at: Optional[datetime] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: Optional[str]) -> str:
        return check_message(v)

    @field_validator("hearts", "created_at")
    @classmethod
    def validate_present(cls, v: Any) -> Any:
        return check_present(v)


class ThoughtReplace(_ThoughtModel):
    """
    Body of PUT /thoughts/{id}: a full representation.

    hearts falls back to 0 when omitted; createdAt is optional and, when
    omitted, the stored timestamp is kept.
    """

    message: str = Field(
        min_length=MESSAGE_MIN_LENGTH,
        max_length=MESSAGE_MAX_LENGTH,
    )
    hearts: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        return check_message(v)

    @field_validator("created_at")
    @classmethod
    def validate_present(cls, v: Any) -> Any:
        return check_present(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class ThoughtResponse(_ThoughtModel):
    """A stored thought as returned by every thought endpoint."""

    id: uuid.UUID = Field(description="Unique thought identifier (UUID)")
    message: str = Field(description="Thought text")
    hearts: int = Field(description="Number of likes")
    created_at: datetime = Field(description="When the thought was created (UTC ISO 8601)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RouteDescriptor(BaseModel):
    """One entry of the endpoint listing served at GET /."""

    path: str
    methods: List[str]


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models — Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Fields:
        error: Machine-readable code (validation_error, not_found, invalid_request)
        message: Human-readable description
        details: Raw validation errors or the underlying error detail
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class DuplicateErrorResponse(BaseModel):
    """Error body for a message that already exists."""

    error: str = Field(default="duplicate_key")
    message: str = Field(default="Duplicated value")
    fields: Dict[str, Any] = Field(description="Conflicting field(s) and value(s)")
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
