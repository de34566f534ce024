"""Authorization denials with user-facing messages."""

from core.exceptions import ActionDenied


class RootRequired(ActionDenied):
    default_detail = "Root privileges are required for this action."
    default_code = "root_required"


class PermissionNotGranted(ActionDenied):
    default_detail = "Your role is not allowed to perform this action."
    default_code = "permission_not_granted"


class SelfRoleChangeForbidden(ActionDenied):
    default_detail = "You cannot change your own role."
    default_code = "self_role_change"


class SelfDeleteForbidden(ActionDenied):
    default_detail = "You cannot delete your own membership."
    default_code = "self_delete"


class RootMemberProtected(ActionDenied):
    default_detail = "Root members cannot be modified or deleted."
    default_code = "root_protected"


__all__ = [
    "RootRequired",
    "PermissionNotGranted",
    "SelfRoleChangeForbidden",
    "SelfDeleteForbidden",
    "RootMemberProtected",
]
