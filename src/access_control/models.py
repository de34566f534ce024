"""Authorization tables: permission catalog, role matrix, page visibility."""

from django.db import models

from .roles import Role


class Permission(models.Model):
    """Named capability that can be enabled per role (e.g. 'create_announcement')."""

    code = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=50)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["category", "name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.code


class RolePermission(models.Model):
    """One cell of the role x permission matrix.

    ``permission_code`` is plain text, not a foreign key: rows may outlive
    their catalog entry, and such orphans resolve to "denied".
    """

    role = models.CharField(max_length=20, choices=Role.choices)
    permission_code = models.CharField(max_length=100)
    enabled = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("role", "permission_code")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.role}-{self.permission_code}={self.enabled}"


class PageSetting(models.Model):
    """Navigation visibility for one page, per role."""

    page_key = models.CharField(max_length=50, unique=True)
    page_name = models.CharField(max_length=100)
    visible_to_admin = models.BooleanField(default=True)
    visible_to_members = models.BooleanField(default=True)
    is_enabled = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["display_order", "page_key"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.page_key


__all__ = ["Permission", "RolePermission", "PageSetting"]
