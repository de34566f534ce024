"""Member directory record carrying the role flags."""

import uuid

from django.conf import settings
from django.db import models


class Member(models.Model):
    """Association member, linked to a login account through ``auth_id``.

    ``is_root`` outranks ``is_admin``: a root member has admin capabilities
    whatever ``is_admin`` says.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    auth = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="member",
    )
    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    is_admin = models.BooleanField(default=False)
    is_root = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    joined_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["full_name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.full_name


__all__ = ["Member"]
