"""Validation and staging of inbound image uploads."""

import logging
import secrets
from dataclasses import dataclass
from pathlib import Path

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from core.storage import LOCATION_STAGING, AbstractStorageBackend, get_media_storage
from core.utils import sanitize_filename

from .exceptions import ImageTooLargeError, MissingUploadError, UnsupportedImageTypeError

logger = logging.getLogger(__name__)


@dataclass
class StagedUpload:
    """An accepted upload sitting in temp_uploads/ under a generated name."""

    name: str
    path: Path
    original_name: str
    content_type: str
    size: int


class UploadStager:
    """
    Accept one uploaded file and stage it for optimization.

    The declared MIME type and the extension must both be on the allow-list
    and must agree with each other. Nothing the client sends ends up in the
    staged filename except the validated extension.
    """

    def __init__(self, storage: AbstractStorageBackend | None = None):
        self.storage = storage or get_media_storage()
        pipeline = settings.CAMPUS_IMAGE_PIPELINE
        self.allowed_types: dict[str, tuple[str, ...]] = pipeline["ALLOWED_TYPES"]
        self.max_bytes: int = pipeline["MAX_UPLOAD_BYTES"]

    def validate(self, original_name: str, content_type: str, size: int) -> str:
        """
        Check type and size. Returns the normalized extension.

        Raises:
            UnsupportedImageTypeError: MIME type or extension not allowed, or
                the two disagree
            ImageTooLargeError: File exceeds MAX_UPLOAD_BYTES
        """
        mime = (content_type or "").split(";")[0].strip().lower()
        extension = Path(sanitize_filename(original_name or "")).suffix.lower()
        allowed_extensions = self.allowed_types.get(mime)

        if allowed_extensions is None or extension not in allowed_extensions:
            logger.info(f"Rejected upload '{original_name}' ({mime or 'no type'})")
            raise UnsupportedImageTypeError(
                data={
                    "mimeType": mime,
                    "extension": extension,
                    "allowed": sorted(self.allowed_types),
                }
            )

        if size > self.max_bytes:
            raise ImageTooLargeError(
                f"Image exceeds the maximum upload size of {self.max_bytes // (1024 * 1024)} MB",
                data={"maxBytes": self.max_bytes, "size": size},
            )

        return extension

    def stage(self, upload: UploadedFile | None) -> StagedUpload:
        """Validate ``upload`` and write it to temp_uploads/."""
        if upload is None:
            raise MissingUploadError()

        extension = self.validate(upload.name, upload.content_type, upload.size)
        name = f"{secrets.token_hex(16)}{extension}"

        upload.seek(0)
        info = self.storage.save(LOCATION_STAGING, name, upload)

        return StagedUpload(
            name=name,
            path=self.storage.path(LOCATION_STAGING, name),
            original_name=upload.name,
            content_type=upload.content_type,
            size=info.size,
        )
