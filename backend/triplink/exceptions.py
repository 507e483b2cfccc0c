"""
TripLink Backend — Exception Hierarchy
========================================

What:  The closed set of error kinds raised by domain services.
How:   Each class carries a machine-readable `code`, an HTTP `status_code`,
       a user-facing message and an optional context dict. One handler in
       main.py renders all of them as structured JSON.
Who:   Raised by services, the auth dependency and the validation layer.

Exception Hierarchy:
    TripLinkError (base)
    ├── ValidationError     → 400 validation_error
    ├── UnauthorizedError   → 401 unauthorized
    ├── ForbiddenError      → 403 forbidden
    ├── NotFoundError       → 404 not_found
    ├── ConflictError       → 409 conflict
    └── InternalError       → 500 internal_error
"""

from typing import Any, Dict, List, Optional


class TripLinkError(Exception):
    """
    Base exception for all TripLink application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional details; returned as `details` outside production
    """

    code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TripLinkError):
    """
    Raised when input is malformed, missing or out of range.

    `errors` holds one entry per violated constraint:
        [{"field": "email", "message": "value is not a valid email address", "type": "value_error"}]
    """

    code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or []


class UnauthorizedError(TripLinkError):
    """Missing, invalid or expired credentials."""

    code = "unauthorized"
    status_code = 401

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(TripLinkError):
    """Authenticated, but the actor's role or ownership does not allow the action."""

    code = "forbidden"
    status_code = 403

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TripLinkError):
    """
    Raised when a requested or referenced entity does not exist.

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception, including for dangling foreign keys on writes.
    """

    code = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(TripLinkError):
    """Uniqueness violation or an illegal state transition."""

    code = "conflict"
    status_code = 409

    def __init__(
        self,
        message: str = "The request conflicts with the current state of the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(TripLinkError):
    """
    Unexpected failure in a collaborator (database, token library, ...).

    The message returned to the client is always generic; context is logged
    server-side.
    """

    code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
