"""
Domain errors and their mapping to HTTP responses.

Routes never build error responses for these by hand: raise the error and
the handler registered in main.py turns it into the standard error body.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for errors the service reports to its callers"""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.__class__.message
        self.details = details or None
        super().__init__(self.message)


class ValidationError(DomainError):
    """Malformed input: bad email, missing field, unusable title"""

    status_code = 422
    error_code = "VALIDATION_ERROR"
    message = "Invalid input"


class SlugConflictError(ValidationError):
    status_code = 409
    error_code = "SLUG_CONFLICT"
    message = "An event with this slug already exists"

    def __init__(self, slug: str):
        super().__init__(slug=slug)
        self.slug = slug


class ReferentialIntegrityError(DomainError):
    """A booking points at an event that does not exist"""

    status_code = 404
    error_code = "EVENT_NOT_FOUND"
    message = "Event not found"

    def __init__(self, event_id: Any):
        super().__init__(event_id=str(event_id))
        self.event_id = event_id


class VerificationFailure(DomainError):
    """The event existence check could not complete; the caller may retry"""

    status_code = 503
    error_code = "EVENT_VERIFICATION_FAILED"
    message = "Could not verify the event right now, please try again"

    def __init__(self, event_id: Any):
        super().__init__(event_id=str(event_id))
        self.event_id = event_id


class BookingNotFoundError(DomainError):
    status_code = 404
    error_code = "BOOKING_NOT_FOUND"
    message = "Booking not found"


class StorageError(DomainError):
    """The backing store failed or is unreachable"""

    status_code = 503
    error_code = "STORAGE_UNAVAILABLE"
    message = "Storage is temporarily unavailable"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    # local import: responses pulls in schemas, which import the models
    from app.utils.responses import error_response

    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    else:
        logger.info("%s on %s %s", exc.error_code, request.method, request.url.path)

    return error_response(
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        status_code=exc.status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handler on the application"""
    app.add_exception_handler(DomainError, domain_error_handler)
