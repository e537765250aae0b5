"""Abstract media storage interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Iterator

# Storage locations, each a flat directory of generated filenames
LOCATION_STAGING = "temp_uploads"
LOCATION_TEMPORARY = "temp_images"
LOCATION_PERMANENT = "images"

LOCATIONS = (LOCATION_STAGING, LOCATION_TEMPORARY, LOCATION_PERMANENT)


@dataclass
class FileInfo:
    """File metadata returned by storage backend operations."""
    name: str
    location: str
    size: int
    modified_at: datetime
    content_type: str | None = None


class AbstractStorageBackend(ABC):
    """
    Abstract interface for media storage backends.

    Files are addressed by ``(location, name)``. Locations are flat; names
    never contain separators.
    """

    @abstractmethod
    def save(self, location: str, name: str, content: BinaryIO) -> FileInfo:
        """
        Save file content. Overwrites if it exists.

        Raises:
            ValueError: If location or name is invalid
        """
        pass

    @abstractmethod
    def open(self, location: str, name: str) -> BinaryIO:
        """
        Open file for reading.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def delete(self, location: str, name: str) -> None:
        """
        Delete a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def exists(self, location: str, name: str) -> bool:
        pass

    @abstractmethod
    def list(self, location: str) -> Iterator[FileInfo]:
        """Yield FileInfo for every regular file in a location."""
        pass

    @abstractmethod
    def info(self, location: str, name: str) -> FileInfo:
        """
        Get metadata about a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def move(self, name: str, source: str, destination: str) -> FileInfo:
        """
        Move a file between locations, keeping its name.

        Raises:
            FileNotFoundError: If the source file doesn't exist
            FileExistsError: If the destination already holds the name
        """
        pass
