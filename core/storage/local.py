"""Local filesystem media storage backend."""

import mimetypes
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterator

from django.conf import settings

from .base import LOCATIONS, AbstractStorageBackend, FileInfo


class LocalStorageBackend(AbstractStorageBackend):
    """
    Local filesystem storage backend.

    Stores files under CAMPUS_MEDIA_ROOT, one directory per location:
    ``temp_uploads/``, ``temp_images/`` and ``images/``.
    """

    def __init__(self, root: Path | None = None):
        """
        Initialize local storage backend.

        Args:
            root: Optional override for the media root.
                  Defaults to settings.CAMPUS_MEDIA_ROOT
        """
        self.root = Path(root or settings.CAMPUS_MEDIA_ROOT).resolve()

        for location in LOCATIONS:
            (self.root / location).mkdir(parents=True, exist_ok=True)

    def _resolve_path(self, location: str, name: str = "") -> Path:
        """
        Convert a (location, name) pair to an absolute filesystem path.

        Raises:
            ValueError: If location is unknown or name escapes the location
        """
        if location not in LOCATIONS:
            raise ValueError(f"Unknown storage location: {location}")

        base = self.root / location
        if not name:
            return base

        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(f"Invalid path: {name} (directory traversal detected)")

        full_path = (base / name).resolve()
        try:
            full_path.relative_to(base)
        except ValueError:
            raise ValueError(f"Invalid path: {name} (directory traversal detected)")

        return full_path

    def path(self, location: str, name: str) -> Path:
        """Absolute filesystem path for a stored file."""
        return self._resolve_path(location, name)

    def _file_info(self, path: Path, location: str) -> FileInfo:
        stat = path.stat()

        return FileInfo(
            name=path.name,
            location=location,
            size=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            content_type=mimetypes.guess_type(path.name)[0],
        )

    def save(self, location: str, name: str, content: BinaryIO) -> FileInfo:
        """Save file content, streaming in chunks."""
        full_path = self._resolve_path(location, name)

        with full_path.open("wb") as f:
            for chunk in iter(lambda: content.read(8192), b""):
                f.write(chunk)

        return self._file_info(full_path, location)

    def open(self, location: str, name: str) -> BinaryIO:
        full_path = self._resolve_path(location, name)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {location}/{name}")

        return full_path.open("rb")

    def delete(self, location: str, name: str) -> None:
        full_path = self._resolve_path(location, name)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {location}/{name}")

        full_path.unlink()

    def exists(self, location: str, name: str) -> bool:
        try:
            return self._resolve_path(location, name).is_file()
        except ValueError:
            # Invalid path (traversal attempt)
            return False

    def list(self, location: str) -> Iterator[FileInfo]:
        for entry in self._resolve_path(location).iterdir():
            if entry.is_file():
                yield self._file_info(entry, location)

    def info(self, location: str, name: str) -> FileInfo:
        full_path = self._resolve_path(location, name)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {location}/{name}")

        return self._file_info(full_path, location)

    def move(self, name: str, source: str, destination: str) -> FileInfo:
        source_full = self._resolve_path(source, name)
        dest_full = self._resolve_path(destination, name)

        if not source_full.is_file():
            raise FileNotFoundError(f"Source not found: {source}/{name}")

        if dest_full.exists():
            raise FileExistsError(f"File '{name}' already exists in {destination}")

        shutil.move(str(source_full), str(dest_full))

        return self._file_info(dest_full, destination)
