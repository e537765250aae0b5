"""Error taxonomy and DRF exception handler for the Campus CMS API.

Every error leaves the API in the same envelope as a success::

    {"status": "error", "message": "...", "data": {...} | null}
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class CampusError(Exception):
    """Base exception for Campus CMS errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, data=None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationError(CampusError):
    """Request validation error."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(CampusError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationError(CampusError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFoundError(CampusError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(CampusError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource conflict"


class RateLimitError(CampusError):
    """Request rejected by DdosGuard or a fixed-window throttle."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests, please try again later"

    def __init__(self, message: str | None = None, data=None, retry_after: int | None = None):
        super().__init__(message, data)
        self.retry_after = retry_after


class ProcessingError(CampusError):
    """Server-side processing failed (image conversion, file I/O)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not process the request"


class UnknownError(CampusError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(message: str, data=None, status_code: int = 500, headers=None) -> Response:
    """Build an error envelope response."""
    return Response(
        {"status": "error", "message": message, "data": data},
        status=status_code,
        headers=headers,
    )


def _drf_message(exc: drf_exceptions.APIException) -> tuple[str, dict | None]:
    detail = exc.detail
    if isinstance(detail, dict):
        return "Validation failed", {"errors": detail}
    if isinstance(detail, list):
        return "Validation failed", {"errors": detail}
    return str(detail), None


def campus_exception_handler(exc, context):
    """
    DRF exception handler producing the Campus CMS envelope.

    Handles CampusError subclasses, DRF APIExceptions, Django Http404 and
    PermissionDenied. Anything else is logged with its traceback and
    reported as an UnknownError.
    """
    if isinstance(exc, RateLimitError):
        headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
        return error_response(exc.message, exc.data, exc.status_code, headers)

    if isinstance(exc, CampusError):
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.__class__.__name__, exc.message, exc_info=exc)
        return error_response(exc.message, exc.data, exc.status_code)

    if isinstance(exc, Http404):
        return error_response(NotFoundError.default_message, None, status.HTTP_404_NOT_FOUND)

    if isinstance(exc, DjangoPermissionDenied):
        return error_response(
            AuthorizationError.default_message, None, status.HTTP_403_FORBIDDEN
        )

    if isinstance(exc, drf_exceptions.APIException):
        message, data = _drf_message(exc)
        headers = {}
        if getattr(exc, "auth_header", None):
            headers["WWW-Authenticate"] = exc.auth_header
        if getattr(exc, "wait", None) is not None:
            headers["Retry-After"] = str(int(exc.wait))
        return error_response(message, data, exc.status_code, headers or None)

    view = context.get("view")
    logger.error(
        "Unhandled error in %s",
        view.__class__.__name__ if view else "unknown view",
        exc_info=exc,
    )
    return error_response(UnknownError.default_message, None, UnknownError.status_code)
