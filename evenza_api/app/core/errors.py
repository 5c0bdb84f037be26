"""
Domain exceptions raised by the service layer.

All of them derive from ``ValueError`` so callers that only care about
"the request was wrong" can catch the base class.  The API layer maps
them to HTTP status codes with ``http_status_for``.
"""

from fastapi import HTTPException, status


class NotFoundError(ValueError):
    """The requested record does not exist (404)."""


class ConflictError(ValueError):
    """A uniqueness rule was violated, e.g. duplicate email or slug (409)."""


class ForbiddenError(ValueError):
    """The caller is authenticated but may not perform this change (403)."""


class CapacityError(ValueError):
    """The event, trip or interview has no free places left."""


class DuplicateRegistrationError(ValueError):
    """The caller already appears in the membership list."""


class RegistrationClosedError(ValueError):
    """The target is not accepting registrations (cancelled, closed, ...)."""


class InvalidStatusError(ValueError):
    """A status value outside the allowed enumeration."""


class InvalidTransitionError(ValueError):
    """A status change that the transition table does not allow."""


def http_status_for(exc: ValueError) -> int:
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, ForbiddenError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_400_BAD_REQUEST


def to_http(exc: ValueError) -> HTTPException:
    """Translate a service error into an ``HTTPException``."""
    return HTTPException(status_code=http_status_for(exc), detail=str(exc))
