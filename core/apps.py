import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    name = "core"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Warn about settings that only matter once deployed."""
        from django.conf import settings

        if settings.IS_PRODUCTION and settings.JWT_SECRET_KEY == settings.SECRET_KEY:
            logger.warning("JWT_SECRET_KEY is not set; tokens are signed with SECRET_KEY")

        if settings.RECAPTCHA_ENABLED and not settings.RECAPTCHA_SECRET_KEY:
            logger.warning(
                "RECAPTCHA_ENABLED is set without RECAPTCHA_SECRET_KEY; "
                "registrations will be rejected"
            )
