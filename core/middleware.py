"""Request logging and Sentry context middleware."""

import logging
import time

from django.conf import settings
from sentry_sdk import set_context, set_tag, set_user

from core.utils import get_client_ip

logger = logging.getLogger("campus.requests")


class RequestLoggingMiddleware:
    """
    Log API requests with status, duration and client IP.

    Error responses (>= 400) are logged at WARNING, everything else at INFO.
    Non-API paths are passed through untouched.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api/"):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = (time.monotonic() - started) * 1000

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s %s %.1fms ip=%s",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
            get_client_ip(request),
        )
        return response


class SentryContextMiddleware:
    """
    Add user and request context to Sentry error reports.

    Calls are no-ops until sentry_sdk.init() has run, so the middleware is
    safe to enable when SENTRY_DSN is unset.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if settings.SENTRY_DSN:
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                set_user({
                    "id": user.id,
                    "username": user.username,
                    "role": getattr(user, "role", None),
                    # Explicitly NOT including: email, ip_address
                })

            set_tag("request_path", request.path)
            set_tag("request_method", request.method)

            set_context("campus", {
                "environment": settings.ENVIRONMENT,
                "media_root": str(settings.CAMPUS_MEDIA_ROOT),
            })

        return self.get_response(request)
