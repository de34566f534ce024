"""DRF permission classes enforcing the role permission matrix."""

import logging

from rest_framework import permissions

from core.exceptions import DEFAULT_DENIAL_MESSAGE

from .exceptions import RootRequired
from .roles import Role
from .services import check_permission, get_actor

logger = logging.getLogger(__name__)


class RolePermissionRequired(permissions.BasePermission):
    """Allow a view action only when the actor's role holds its permission code.

    Views declare ``action_permissions``: a mapping from viewset action (or
    lowercase HTTP method for plain API views) to a permission code. A value
    of None means "any authenticated account". Actions missing from the
    mapping are denied.
    """

    message = DEFAULT_DENIAL_MESSAGE

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False

        mapping = getattr(view, "action_permissions", None) or {}
        action = getattr(view, "action", None) or request.method.lower()
        if action not in mapping:
            logger.warning("%s has no permission mapped for action %r", type(view).__name__, action)
            return False

        code = mapping[action]
        if code is None:
            return True
        return check_permission(get_actor(request).role, code)


class IsRoot(permissions.BasePermission):
    """Hard gate for root-only actions; the permission matrix cannot grant these."""

    message = RootRequired.default_detail

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not user or not getattr(user, "is_authenticated", False):
            return False
        if get_actor(request).role != Role.ROOT:
            raise RootRequired()
        return True


__all__ = ["RolePermissionRequired", "IsRoot"]
