"""App configuration for the member directory."""

from django.apps import AppConfig


class MembersConfig(AppConfig):
    """Member records, role flags, and the directory endpoints."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "members"
