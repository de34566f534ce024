"""System checks for views guarded by the role permission matrix."""

from django.core import checks

from access_control.catalog import DEFAULT_PERMISSIONS
from access_control.permissions import RolePermissionRequired


def _guarded_views():
    # Imported lazily to avoid circular imports at module load time.
    from access_control import views as access_views
    from announcements.views import AnnouncementViewSet
    from members.views import MemberViewSet

    return [
        AnnouncementViewSet,
        MemberViewSet,
        access_views.NavigationView,
        access_views.PermissionCheckView,
        access_views.PageSettingsView,
        access_views.PageSettingsSaveView,
    ]


@checks.register()
def guarded_views_declare_action_permissions(app_configs, **kwargs):
    """Views using RolePermissionRequired must map their actions to catalog codes.

    Unmapped actions are denied at runtime, so a missing mapping is an error.
    A code absent from the default catalog is only a warning: it may be
    seeded separately, and until then it resolves to "denied".
    """
    errors: list = []
    known_codes = {code for code, *_ in DEFAULT_PERMISSIONS}

    for view_cls in _guarded_views():
        if RolePermissionRequired not in getattr(view_cls, "permission_classes", []):
            continue
        mapping = getattr(view_cls, "action_permissions", None)
        if not mapping:
            errors.append(
                checks.Error(
                    f"{view_cls.__name__} uses RolePermissionRequired but does not "
                    f"define action_permissions.",
                    obj=view_cls,
                    id="access_control.E001",
                )
            )
            continue
        for action, code in mapping.items():
            if code is not None and code not in known_codes:
                errors.append(
                    checks.Warning(
                        f"{view_cls.__name__}.{action} requires unknown permission code {code!r}.",
                        obj=view_cls,
                        id="access_control.W001",
                    )
                )

    return errors
