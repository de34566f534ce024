"""Pure authorization rules: permission lookups and page visibility.

Nothing in this module touches the database. Callers load rows, build a
matrix, and ask these functions for a decision.
"""

from typing import Any, Iterable, Mapping

from .exceptions import RootRequired
from .roles import Role

PermissionKey = tuple[str, str]
PermissionMatrix = Mapping[PermissionKey, bool]

_ROLE_VALUES = frozenset(role.value for role in Role)


def permission_key(role: str, code: str) -> PermissionKey:
    return str(role), code


def format_permission_key(key: PermissionKey) -> str:
    """Render a key in the ``role-code`` form used by the settings API."""
    role, code = key
    return f"{role}-{code}"


def parse_permission_key(raw: str) -> PermissionKey:
    """Parse ``role-code`` into a key; the code may itself contain hyphens."""
    role, sep, code = raw.partition("-")
    if not sep or role not in _ROLE_VALUES or not code:
        raise ValueError(f"Invalid permission key: {raw!r}")
    return role, code


def is_allowed(matrix: PermissionMatrix, role: Any, code: Any) -> bool:
    """Return the matrix value for (role, code), False when absent.

    Total over its inputs: a missing role, unknown code, or malformed
    argument resolves to False rather than raising.
    """
    if role is None or not isinstance(code, str) or not code:
        return False
    role_value = str(role)
    if role_value not in _ROLE_VALUES:
        return False
    return matrix.get((role_value, code), False) is True


def require_root(role: Any) -> None:
    """Gate for actions the matrix may never grant (matrix edits, admin promotion)."""
    if role != Role.ROOT:
        raise RootRequired()


def _page_visible(setting, role: Any) -> bool:
    if not setting.is_enabled or role is None:
        return False
    if role == Role.ROOT:
        return True
    if role == Role.ADMIN:
        return bool(setting.visible_to_admin)
    if role == Role.MEMBER:
        return bool(setting.visible_to_members)
    return False


def visible_page_settings(settings: Iterable, role: Any) -> list:
    """Enabled settings the role may see in navigation, by display order.

    Display gating only; the data behind a page is protected by its own
    permission checks.
    """
    visible = [setting for setting in settings if _page_visible(setting, role)]
    visible.sort(key=lambda setting: (setting.display_order, setting.page_key))
    return visible


def visible_pages(settings: Iterable, role: Any) -> list[str]:
    return [setting.page_name for setting in visible_page_settings(settings, role)]


__all__ = [
    "PermissionKey",
    "PermissionMatrix",
    "permission_key",
    "format_permission_key",
    "parse_permission_key",
    "is_allowed",
    "require_root",
    "visible_page_settings",
    "visible_pages",
]
