"""Django signals for image lifecycle events."""

from django.dispatch import Signal

# Fired after an image action completes or fails
#
# Arguments:
#   sender: AssetStore (or view) class that triggered the signal
#   action: str - upload, upload_temp, promote, delete, force_delete
#   filename: str - Stored filename
#   location: str - images or temp_images
#   actor: User or None
#   success: bool
#
# Optional kwargs:
#   size: int - Stored size in bytes
#   references: list - Articles still pointing at a force-deleted image
#   error: str - Failure reason
image_action_performed = Signal()
