"""
Asset Store.

Owns the lifecycle of optimized images once they are written: promotion from
temp_images/ to images/, deletion (single, bulk, forced) and listing.

Usage:
    store = AssetStore()
    url = store.promote("/api/images/temp_images/20260101-ab12....jpg")
    result = store.bulk_delete(["a.jpg", "b.jpg"], actor=request.user)
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from django.utils import timezone

from core.exceptions import CampusError, ValidationError
from core.storage import (
    LOCATION_PERMANENT,
    LOCATION_TEMPORARY,
    AbstractStorageBackend,
    FileInfo,
    get_media_storage,
)
from core.utils import PathValidationError, validate_filename

from .exceptions import ImageNotFoundError, ImageProcessingError, InvalidFilenameError
from .locations import parse_image_url, public_url
from .references import ReferenceGuard
from .signals import image_action_performed

logger = logging.getLogger(__name__)


@dataclass
class BulkDeleteResult:
    """Partition of a bulk delete request."""

    deleted: List[str] = field(default_factory=list)
    failed: dict = field(default_factory=dict)


@dataclass
class ImageListFilters:
    """Listing filters. Dates are inclusive local dates, sizes inclusive bytes."""

    page: int = 1
    limit: int = 20
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None


@dataclass
class ImagePage:
    items: List[FileInfo]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class AssetStore:
    """
    Service for permanent image storage.

    Bulk deletes process every name independently; one failure never aborts
    the batch.
    """

    # Maximum filenames per bulk request
    MAX_BULK_FILENAMES = 250

    def __init__(
        self,
        storage: Optional[AbstractStorageBackend] = None,
        guard: Optional[ReferenceGuard] = None,
    ):
        self.storage = storage or get_media_storage()
        self.guard = guard or ReferenceGuard()

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------

    @staticmethod
    def public_url(filename: str, location: str = LOCATION_PERMANENT) -> str:
        return public_url(filename, location)

    @staticmethod
    def is_temporary_url(url: str) -> bool:
        parsed = parse_image_url(url)
        return parsed is not None and parsed[0] == LOCATION_TEMPORARY

    @staticmethod
    def validate_name(filename: str) -> str:
        try:
            return validate_filename(filename)
        except PathValidationError as e:
            logger.warning(f"Rejected image filename {filename!r}: {e}")
            raise InvalidFilenameError(data={"filename": filename})

    def _emit(self, action: str, filename: str, location: str, actor, success: bool, **kwargs):
        image_action_performed.send(
            sender=self.__class__,
            action=action,
            filename=filename,
            location=location,
            actor=actor,
            success=success,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Promotion
    # -------------------------------------------------------------------------

    def promote(self, url: str, actor=None) -> str:
        """
        Move a temporary image to permanent storage and return its new URL.

        A URL that already points at a permanent image (or a temp image that
        was promoted before) resolves to the permanent URL.

        Raises:
            InvalidFilenameError: URL is not an image URL or the name is unsafe
            ImageNotFoundError: File exists in neither location
        """
        parsed = parse_image_url(url)
        if parsed is None:
            raise InvalidFilenameError("Not an image URL", data={"url": url})

        location, filename = parsed
        filename = self.validate_name(filename)
        permanent = self.public_url(filename)

        if location == LOCATION_PERMANENT:
            if self.storage.exists(LOCATION_PERMANENT, filename):
                return permanent
            raise ImageNotFoundError(data={"url": url})

        try:
            self.storage.move(filename, LOCATION_TEMPORARY, LOCATION_PERMANENT)
        except FileNotFoundError:
            if self.storage.exists(LOCATION_PERMANENT, filename):
                return permanent
            raise ImageNotFoundError(data={"url": url})
        except FileExistsError:
            # Promoted earlier and the temp copy came back; keep the permanent one
            self.storage.delete(LOCATION_TEMPORARY, filename)
            return permanent

        self._emit("promote", filename, LOCATION_PERMANENT, actor, True)
        return permanent

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def _unlink(self, filename: str, actor, action: str, **audit) -> None:
        try:
            self.storage.delete(LOCATION_PERMANENT, filename)
        except FileNotFoundError:
            raise ImageNotFoundError(data={"filename": filename})
        except OSError as e:
            logger.error(f"Failed to delete image {filename}: {e}")
            self._emit(action, filename, LOCATION_PERMANENT, actor, False, error=str(e))
            raise ImageProcessingError("Could not delete the image") from e

        self._emit(action, filename, LOCATION_PERMANENT, actor, True, **audit)

    def delete(self, filename: str, actor=None) -> None:
        """
        Delete a permanent image that no article references.

        Raises:
            InvalidFilenameError: Name changes under sanitization
            ImageNotFoundError: No such image
            ImageInUseError: Articles still reference the image
            ImageProcessingError: Filesystem failure
        """
        filename = self.validate_name(filename)

        if not self.storage.exists(LOCATION_PERMANENT, filename):
            raise ImageNotFoundError(data={"filename": filename})

        self.guard.ensure_unreferenced(filename)
        self._unlink(filename, actor, "delete")

    def bulk_delete(self, filenames: List[str], actor=None) -> BulkDeleteResult:
        """
        Delete many images, each independently.

        Duplicate names are collapsed (order preserved).

        Raises:
            ValidationError: Empty list or more than MAX_BULK_FILENAMES names
        """
        if not filenames:
            raise ValidationError("filenames must be a non-empty list")

        if len(filenames) > self.MAX_BULK_FILENAMES:
            raise ValidationError(
                f"Too many filenames. Maximum: {self.MAX_BULK_FILENAMES}, received: {len(filenames)}"
            )

        result = BulkDeleteResult()
        for filename in dict.fromkeys(filenames):
            try:
                self.delete(filename, actor)
            except CampusError as e:
                result.failed[filename] = e.message
            else:
                result.deleted.append(filename)

        logger.info(
            f"Bulk delete: {len(result.deleted)} deleted, {len(result.failed)} failed"
        )
        return result

    def force_delete(self, filename: str, actor) -> list:
        """
        Delete a permanent image without the reference check.

        Returns the references that were left dangling.
        """
        filename = self.validate_name(filename)

        if not self.storage.exists(LOCATION_PERMANENT, filename):
            raise ImageNotFoundError(data={"filename": filename})

        references = self.guard.find_references(filename)
        logger.warning(
            f"Force delete of {filename} by {getattr(actor, 'username', actor)}; "
            f"{len(references)} article reference(s) left dangling"
        )
        self._unlink(
            filename,
            actor,
            "force_delete",
            references=[ref["slug"] for ref in references],
        )
        return references

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list(self, filters: ImageListFilters) -> ImagePage:
        """Filter, sort newest first, then paginate."""
        matching = []
        for info in self.storage.list(LOCATION_PERMANENT):
            modified_on = timezone.localtime(info.modified_at).date()
            if filters.start_date and modified_on < filters.start_date:
                continue
            if filters.end_date and modified_on > filters.end_date:
                continue
            if filters.min_size is not None and info.size < filters.min_size:
                continue
            if filters.max_size is not None and info.size > filters.max_size:
                continue
            matching.append(info)

        matching.sort(key=lambda info: (info.modified_at, info.name), reverse=True)

        start = (filters.page - 1) * filters.limit
        return ImagePage(
            items=matching[start:start + filters.limit],
            page=filters.page,
            limit=filters.limit,
            total=len(matching),
        )
