"""Media storage abstraction for Campus CMS."""

from .base import (
    LOCATION_PERMANENT,
    LOCATION_STAGING,
    LOCATION_TEMPORARY,
    LOCATIONS,
    AbstractStorageBackend,
    FileInfo,
)
from .local import LocalStorageBackend


def get_media_storage() -> AbstractStorageBackend:
    """Return a storage backend rooted at the configured media root."""
    return LocalStorageBackend()


__all__ = [
    "AbstractStorageBackend",
    "FileInfo",
    "LocalStorageBackend",
    "LOCATIONS",
    "LOCATION_PERMANENT",
    "LOCATION_STAGING",
    "LOCATION_TEMPORARY",
    "get_media_storage",
]
