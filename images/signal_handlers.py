"""Signal handlers for image audit logging."""

import logging
from typing import Any

from django.dispatch import receiver

from .signals import image_action_performed

# Separate audit logger for image operations
audit_logger = logging.getLogger("campus.audit")


@receiver(image_action_performed)
def log_image_action(
    sender: Any,
    action: str,
    filename: str,
    location: str,
    actor: Any,
    success: bool,
    **kwargs: Any,
) -> None:
    """Write one audit line per image action."""
    actor_name = getattr(actor, "username", None) or "anonymous"
    level = logging.INFO
    if action == "force_delete" or not success:
        level = logging.WARNING

    extras = " ".join(
        f"{key}={kwargs[key]}" for key in ("size", "references", "error") if kwargs.get(key)
    )
    audit_logger.log(
        level,
        f"image.{action} {location}/{filename} by={actor_name} success={success} {extras}".rstrip(),
    )
