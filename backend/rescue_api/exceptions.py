"""
Animal Rescue API — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per outcome kind the API can report.
How:   Each exception carries a public message (safe for the response body)
       and a context dict (logged server-side, never returned to the caller).
       `build_response` renders any of them into an ApiResponse using the
       class-level `status_code`.
Who:   Raised by the codec, repository and dispatcher; rendered by the
       response builder.

Exception Hierarchy:
    RescueError (base)
    ├── ValidationError          → 400 Bad Request (bad body, bad identifier)
    ├── MissingIdentifierError   → 400 Bad Request (PATCH/DELETE without id)
    ├── MethodNotSupportedError  → 405 Method Not Allowed
    ├── PersistenceError         → 500 Internal Server Error (any store failure)
    ├── EncodingError            → 500 Internal Server Error (serialization)
    └── InitializationError      → fatal at startup, never rendered

    A read of a missing row is a PersistenceError. There is no NotFoundError.
"""

from typing import Any, Dict, Optional


class RescueError(Exception):
    """
    Base exception for all Animal Rescue API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    kind: str = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RescueError):
    """
    Raised when client input cannot be structurally decoded.

    When:    Body is not a JSON object of the right shape, or the path
             identifier is not an integer.
    HTTP:    400 Bad Request

    Missing or empty required fields are NOT validation errors; they are
    left for the store's constraints to judge.
    """

    status_code = 400
    kind = "validation_error"

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


class MissingIdentifierError(RescueError):
    """Raised when PATCH or DELETE arrives without a path identifier. HTTP 400."""

    status_code = 400
    kind = "missing_identifier"

    def __init__(
        self,
        method: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["method"] = method
        super().__init__(message="ID not provided", context=ctx)
        self.method = method


class MethodNotSupportedError(RescueError):
    """Raised for any verb outside GET/POST/PATCH/DELETE. HTTP 405."""

    status_code = 405
    kind = "method_not_allowed"

    def __init__(
        self,
        method: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["method"] = method
        super().__init__(message="Method not allowed", context=ctx)
        self.method = method


class PersistenceError(RescueError):
    """
    Raised when a store call fails for any reason.

    When:    Connection lost, constraint violation, no row for a single-row
             read, driver error.
    HTTP:    500 Internal Server Error

    Security Note:
        The message is a generic, per-operation sentence ("Failed to create
        animal"). The driver error text lives only in `context`.
    """

    kind = "persistence_error"

    def __init__(
        self,
        message: str = "A database error occurred",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


class EncodingError(RescueError):
    """Raised when an entity or collection cannot be serialized. HTTP 500."""

    kind = "encoding_error"

    def __init__(
        self,
        message: str = "Failed to encode response",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InitializationError(RescueError):
    """
    Raised when the process cannot reach a usable store at startup.

    When:    Secret cannot be fetched or parsed, credentials incomplete,
             first ping fails.
    Effect:  Propagates out of the FastAPI lifespan, so the server refuses
             to start. There is no lazy reconnect on first request.
    """

    kind = "initialization_error"

    def __init__(
        self,
        message: str = "Database initialization failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
