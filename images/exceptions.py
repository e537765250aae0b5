"""Typed rejections raised by the image pipeline."""

from core.exceptions import ConflictError, NotFoundError, ProcessingError, ValidationError


class UnsupportedImageTypeError(ValidationError):
    default_message = "Only JPEG, PNG, GIF and WebP images are allowed"


class ImageTooLargeError(ValidationError):
    default_message = "Image exceeds the maximum upload size"


class MissingUploadError(ValidationError):
    default_message = "No file uploaded or file was rejected"


class InvalidFilenameError(ValidationError):
    default_message = "Invalid filename"


class ImageNotFoundError(NotFoundError):
    default_message = "Image not found"


class ImageInUseError(ConflictError):
    """The image is still referenced by one or more articles."""

    default_message = "Image is in use"


class ImageProcessingError(ProcessingError):
    default_message = "Could not process the image"
