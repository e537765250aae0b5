"""Public URLs of stored images."""

from urllib.parse import urlparse

from core.storage import LOCATION_PERMANENT, LOCATION_TEMPORARY

IMAGE_URL_PREFIX = "/api/images/"

# Locations reachable through the public URL space
PUBLIC_LOCATIONS = (LOCATION_PERMANENT, LOCATION_TEMPORARY)


def public_url(filename: str, location: str = LOCATION_PERMANENT) -> str:
    """``/api/images/<location>/<filename>``."""
    return f"{IMAGE_URL_PREFIX}{location}/{filename}"


def parse_image_url(url: str) -> tuple[str, str] | None:
    """
    Split an image URL into ``(location, filename)``.

    Accepts absolute URLs too; only the path is considered. Returns None for
    anything outside the public image URL space.
    """
    path = urlparse((url or "").strip()).path
    if not path.startswith(IMAGE_URL_PREFIX):
        return None
    parts = path[len(IMAGE_URL_PREFIX):].split("/")
    if len(parts) != 2 or parts[0] not in PUBLIC_LOCATIONS or not parts[1]:
        return None
    return parts[0], parts[1]
