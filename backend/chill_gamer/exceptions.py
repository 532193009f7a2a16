"""
Chill Gamer Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the API.
Why:   Services raise domain errors; global handlers (registered in main.py)
       turn them into `{"error": ...}` JSON bodies with the right status code.
How:   Each exception class carries a message and optional context dict.
       The message is safe to return; the context is only logged.
Who:   Raised by services and the storage client; caught by global handlers.

Exception Hierarchy:
    ChillGamerError (base)           → 500 Internal Server Error
    ├── ValidationError              → 400 Bad Request (malformed id, bad filter, bad body)
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 400 Bad Request (duplicate watchlist entry)
    ├── StorageUnavailableError      → 503 Service Unavailable (connection / timeout)
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ChillGamerError(Exception):
    """
    Base exception for all Chill Gamer application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ChillGamerError):
    """
    Raised when client input cannot be used as given.

    When:    Malformed ObjectId in a path, non-numeric minRating, user body
             without an email, unparsable JSON body.
    HTTP:    400 Bad Request
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


class NotFoundError(ChillGamerError):
    """
    Raised when a single-document lookup by id finds nothing.

    When:    GET /chill-gamer/reviews/{id} or /chill-gamer/games/{id}.
    HTTP:    404 Not Found

    The message matches the historical API ("Review not found").
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ChillGamerError):
    """
    Raised when an insert collides with a uniqueness constraint.

    When:    Adding a (userEmail, gameTitle) pair that is already on the watchlist.
    HTTP:    400 Bad Request. Clients of the API have always received 400
             for this case, so the status is kept.
    """

    def __init__(
        self,
        message: str = "Already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageUnavailableError(ChillGamerError):
    """
    Raised when the document store cannot be reached in time.

    When:    Connection refused, server selection timeout, operation exceeded
             db_timeout_ms, the readiness gate never opened, or a unique index
             could not be built (the store cannot enforce uniqueness).
    HTTP:    503 Service Unavailable

    No retry happens server-side; the client decides whether to try again.
    """

    def __init__(
        self,
        message: str = "The database is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ChillGamerError):
    """
    Raised when a store operation fails for any other reason.

    When:    Server-side command error, write error, unexpected driver error.
    HTTP:    500 Internal Server Error

    The message returned to the client is generic; the driver error is logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
