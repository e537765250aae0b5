from django.apps import AppConfig


class ImagesConfig(AppConfig):
    name = 'images'
    default_auto_field = 'django.db.models.BigAutoField'

    def ready(self):
        """Import signal handlers when app is ready."""
        import images.signal_handlers  # noqa
