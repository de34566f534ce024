"""Routing for navigation and access control endpoints."""

from django.urls import path

from .views import (
    NavigationView,
    PageSettingsSaveView,
    PageSettingsView,
    PermissionCatalogView,
    PermissionCheckView,
    RolePermissionMatrixView,
    RolePermissionSaveView,
)

urlpatterns = [
    path("navigation/", NavigationView.as_view(), name="navigation"),
    path("access-control/check/", PermissionCheckView.as_view(), name="permission-check"),
    path("access-control/permissions/", PermissionCatalogView.as_view(), name="permission-catalog"),
    path("access-control/role-permissions/", RolePermissionMatrixView.as_view(), name="role-permissions"),
    path(
        "access-control/role-permissions/save/",
        RolePermissionSaveView.as_view(),
        name="role-permissions-save",
    ),
    path("access-control/page-settings/", PageSettingsView.as_view(), name="page-settings"),
    path("access-control/page-settings/save/", PageSettingsSaveView.as_view(), name="page-settings-save"),
]
