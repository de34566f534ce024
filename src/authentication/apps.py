"""App configuration for login accounts and token handling."""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Holds the login account model, JWT service, and auth endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
