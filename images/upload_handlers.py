"""Upload handler that enforces the image size limit while the body streams in."""

from django.conf import settings
from django.core.files.uploadhandler import FileUploadHandler

from .exceptions import ImageTooLargeError


def max_upload_bytes() -> int:
    return settings.CAMPUS_IMAGE_PIPELINE["MAX_UPLOAD_BYTES"]


class MaxUploadSizeHandler(FileUploadHandler):
    """
    Abort a multipart upload as soon as one file passes MAX_UPLOAD_BYTES.

    Sits first in FILE_UPLOAD_HANDLERS and passes chunks through untouched,
    so the memory/temporary-file handlers behind it never see more than one
    chunk past the limit.
    """

    def __init__(self, request=None):
        super().__init__(request)
        self.limit = max_upload_bytes()

    def receive_data_chunk(self, raw_data, start):
        if start + len(raw_data) > self.limit:
            limit_mib = self.limit // (1024 * 1024)
            raise ImageTooLargeError(
                f"Image exceeds the maximum upload size of {limit_mib} MB",
                data={"maxBytes": self.limit},
            )
        return raw_data

    def file_complete(self, file_size):
        return None
