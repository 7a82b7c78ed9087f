from django.apps import AppConfig


class PortalConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'portal'
    verbose_name = 'Job Portal'

    def ready(self):
        # Register signal handlers for auth events
        from . import signals  # noqa: F401
