"""
Happy Thoughts Backend — Custom Exception Hierarchy
====================================================

What:  Defines application-specific exceptions for each error the API reports.
Why:   Services raise these instead of leaking SQLAlchemy or driver errors;
       global exception handlers (registered in main.py) turn them into
       JSON responses with the right status code.
How:   Each exception class carries a message and optional context dict.

Exception Hierarchy:
    HappyThoughtsError (base)
    ├── ValidationError          → 400 Bad Request (message rules broken)
    ├── DuplicateKeyError        → 400 Bad Request (unique message already taken)
    ├── NotFoundError            → 404 Not Found
    └── MalformedRequestError    → 400 Bad Request (bad identifier, storage failure)

One exception per failure: a duplicate message is reported as
DuplicateKeyError only, never as a second generic error.
"""

from typing import Any, Dict, List, Optional


class HappyThoughtsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional info; which parts reach the client is decided per handler
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HappyThoughtsError):
    """
    Raised when a thought fails the message or counter rules.

    When:    Message missing, shorter than 5 or longer than 140 characters,
             contains a digit, or hearts is negative.
    HTTP:    400 Bad Request

    `errors` holds the raw per-field validation errors, in the same shape
    pydantic reports them, so request-body and service-level failures look
    alike to clients.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors or []


class DuplicateKeyError(HappyThoughtsError):
    """
    Raised when an insert or update hits the unique constraint on message.

    HTTP:    400 Bad Request

    Example response:
        {
            "error": "duplicate_key",
            "message": "Duplicated value",
            "fields": {"message": "Hello world"}
        }
    """

    def __init__(
        self,
        fields: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message="Duplicated value", context=context)
        self.fields = fields or {}


class NotFoundError(HappyThoughtsError):
    """
    Raised when no thought matches the requested identifier.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows (not an exception); the service
    converts that None into this error.
    """

    def __init__(
        self,
        resource: str = "thought",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message="Not found", context=ctx)


class MalformedRequestError(HappyThoughtsError):
    """
    Raised for identifiers that are not UUIDs and for storage-layer failures.

    HTTP:    400 Bad Request

    The response carries `context` as error detail: the offending identifier
    or the storage exception's class name. Raw driver messages are logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "Invalid request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
