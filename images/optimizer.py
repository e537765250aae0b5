"""Resize and re-encode staged uploads to bounded JPEGs with Pillow."""

import logging
import secrets
from dataclasses import dataclass

from django.conf import settings
from django.utils import timezone
from PIL import Image

from core.storage import LOCATION_STAGING, AbstractStorageBackend, get_media_storage

from .exceptions import ImageProcessingError
from .staging import StagedUpload

logger = logging.getLogger(__name__)

OUTPUT_MIME_TYPE = "image/jpeg"


def generate_image_filename() -> str:
    """Date stamp plus 128 random bits, e.g. ``20260101-<32 hex>.jpg``."""
    return f"{timezone.localdate():%Y%m%d}-{secrets.token_hex(16)}.jpg"


@dataclass
class OptimizedImage:
    filename: str
    location: str
    size: int
    width: int
    height: int
    mime_type: str = OUTPUT_MIME_TYPE


def to_rgb(image: Image.Image) -> Image.Image:
    """Convert any mode to RGB, flattening transparency onto white."""
    has_alpha = image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


class ImageOptimizer:
    """
    Normalize a staged upload to a JPEG no wider than ``max_width``.

    Smaller images keep their dimensions. On success the staged file is
    removed; on failure it stays in temp_uploads/ for inspection and the
    cleanup command.
    """

    def __init__(
        self,
        storage: AbstractStorageBackend | None = None,
        max_width: int | None = None,
        quality: int | None = None,
    ):
        pipeline = settings.CAMPUS_IMAGE_PIPELINE
        self.storage = storage or get_media_storage()
        self.max_width = max_width or pipeline["MAX_WIDTH"]
        self.quality = quality or pipeline["JPEG_QUALITY"]

    def optimize(self, staged: StagedUpload, location: str) -> OptimizedImage:
        filename = generate_image_filename()
        output_path = self.storage.path(location, filename)

        try:
            with Image.open(staged.path) as source:
                # Animated GIF/WebP: keep the first frame
                source.seek(0)
                image = to_rgb(source)

                if image.width > self.max_width:
                    height = max(1, round(image.height * self.max_width / image.width))
                    image = image.resize((self.max_width, height), Image.LANCZOS)

                image.save(output_path, format="JPEG", quality=self.quality, optimize=True)
                width, height = image.size
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            output_path.unlink(missing_ok=True)
            logger.error(
                f"Image optimization failed for '{staged.original_name}' "
                f"(staged as {staged.name}): {e}"
            )
            raise ImageProcessingError() from e

        self.storage.delete(LOCATION_STAGING, staged.name)
        size = self.storage.info(location, filename).size

        logger.info(
            f"Optimized '{staged.original_name}' -> {location}/{filename} "
            f"({staged.size} -> {size} bytes, {width}x{height})"
        )
        return OptimizedImage(
            filename=filename, location=location, size=size, width=width, height=height
        )
