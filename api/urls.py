"""URL configuration for the Campus CMS API."""

import logging
import time

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from content.urls import article_urlpatterns, category_urlpatterns
from core.storage import LOCATIONS, get_media_storage

logger = logging.getLogger(__name__)

# Server start time for uptime calculation
_server_start_time = time.time()


def health_ping(request):
    """Liveness check for container healthchecks."""
    return JsonResponse({"status": "ok"})


def health_status(request):
    """Database and media root status with uptime."""
    status_data = {
        "status": "healthy",
        "version": "1.0.0",
        "timestamp": int(time.time()),
    }

    uptime_seconds = int(time.time() - _server_start_time)
    hours = uptime_seconds // 3600
    minutes = (uptime_seconds % 3600) // 60
    status_data["uptime"] = f"{hours}h {minutes}m"

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        status_data["database"] = "connected"
    except DatabaseError as e:
        logger.error(f"Health check database failure: {e}")
        status_data["database"] = "error"
        status_data["status"] = "degraded"

    try:
        storage = get_media_storage()
        status_data["media"] = {
            location: sum(1 for _ in storage.list(location)) for location in LOCATIONS
        }
    except OSError as e:
        logger.error(f"Health check media root failure: {e}")
        status_data["media"] = "error"
        status_data["status"] = "degraded"

    return JsonResponse(status_data)


urlpatterns = [
    # Health (no auth required)
    path("health/", health_ping, name="health"),
    path("health/ping/", health_ping, name="health-ping"),
    path("health/status/", health_status, name="health-status"),
    # Schema
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    # =========================================================================
    # Resources
    # =========================================================================
    path("users/", include("accounts.urls")),
    path("articles/", include(article_urlpatterns)),
    path("categories/", include(category_urlpatterns)),
    path("images/", include("images.urls")),
    path("students/", include("students.urls")),
]
