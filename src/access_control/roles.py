"""Role vocabulary and the member → role resolver."""

from django.db import models


class Role(models.TextChoices):
    MEMBER = "member", "Member"
    ADMIN = "admin", "Admin"
    ROOT = "root", "Root"


ALL_ROLES: tuple[Role, ...] = (Role.ROOT, Role.ADMIN, Role.MEMBER)


def resolve_role(member) -> Role | None:
    """Map a member's flags to exactly one role.

    ``is_root`` wins over ``is_admin``; anything else is a plain member.
    Returns None when there is no member record, which every check treats
    as "nothing allowed".
    """
    if member is None:
        return None
    if member.is_root:
        return Role.ROOT
    if member.is_admin:
        return Role.ADMIN
    return Role.MEMBER


__all__ = ["Role", "ALL_ROLES", "resolve_role"]
