"""
Django app configuration for authentication.
"""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Configuration for the authentication application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Authentication"

    def ready(self):
        """
        Register the OpenAPI extension for the bearer authentication class.

        drf-spectacular discovers extensions by subclass registration, so the
        module only needs to be imported.
        """
        from authentication import schema  # noqa: F401
