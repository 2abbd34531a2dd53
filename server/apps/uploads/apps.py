"""Django app configuration for uploads app."""

from typing import override

from django.apps import AppConfig


class UploadsConfig(AppConfig):
    """Configuration for uploads app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.uploads'
    verbose_name = 'Uploads'

    @override
    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        from server.apps.uploads import signals  # noqa: F401
