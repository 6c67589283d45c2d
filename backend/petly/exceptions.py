"""
Petly Backend: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure the services report.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by stores, the catalog client, the favorites ledger and the
       auth dependencies; caught by global handlers.

Exception Hierarchy:
    PetlyError (base)
    ├── ValidationError          → 400 Bad Request
    │   └── InvalidUpdateError   → 400 Bad Request (empty patch)
    ├── UnauthorizedError        → 401 Unauthorized
    ├── ForbiddenError           → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── DuplicateError           → 409 Conflict
    ├── UpstreamError            → 502 Bad Gateway (Petfinder failed)
    ├── EmailDeliveryError       → 503 Service Unavailable
    └── DatabaseError            → 500 Internal Server Error

Absence in the remote catalog is not an exception: single-entity catalog
lookups return None for a remote 404.
"""

from typing import Any, Dict, Optional


class PetlyError(Exception):
    """
    Base exception for all Petly application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler chooses to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PetlyError):
    """
    Raised when client input fails a business rule the schemas cannot express.

    When:    Unknown update fields or search filters, unparseable tri-state
             values, a dog pointing at a shelter or breed that does not exist.
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


class InvalidUpdateError(ValidationError):
    """
    Raised when a partial update carries no fields at all.

    An empty patch is always a caller bug, never a legitimate no-op.
    """

    def __init__(self, message: str = "No data to update"):
        super().__init__(message=message)


class UnauthorizedError(PetlyError):
    """
    Raised for bad credentials or a missing/invalid token.

    HTTP:    401 Unauthorized

    Security:
        authenticate() raises this with the same message whether the username
        is unknown or the password is wrong, so responses cannot be used to
        enumerate usernames.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(PetlyError):
    """
    Raised when an authenticated user acts on something they do not own.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PetlyError):
    """
    Raised when a requested resource does not exist.

    When:    A store identity, adopter username, favorite pair or breed id
             does not resolve.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DuplicateError(PetlyError):
    """
    Raised when a uniqueness rule is violated.

    When:    Registering a taken username, favoriting the same dog twice.
             Raised both by explicit pre-checks and when the storage layer
             reports a unique-constraint violation for a concurrent insert.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Duplicate entry",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(PetlyError):
    """
    Raised when the Petfinder API fails with anything other than not-found.

    HTTP:    502 Bad Gateway

    Attributes:
        status_code: HTTP status returned by Petfinder, or None when the call
                     never produced a response (DNS, connection reset, timeout).
    """

    def __init__(
        self,
        message: str = "The pet catalog service returned an error",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["upstream_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class EmailDeliveryError(PetlyError):
    """
    Raised when an outgoing email could not be handed to the SMTP server.

    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "Email could not be sent. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PetlyError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. SQL text and
        driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
