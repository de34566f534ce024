"""Endpoints for navigation, permission checks, and the settings screens."""

from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from core.response import BaseAPIView, api_response

from .catalog import MANAGE_PAGE_SETTINGS
from .drafts import PageSettingsDraft, SaveResult
from .models import Permission
from .permissions import IsRoot, RolePermissionRequired
from .policy import format_permission_key
from .roles import ALL_ROLES
from .serializers import (
    NavigationEntrySerializer,
    PageSettingSerializer,
    PageSettingsDraftSerializer,
    PermissionDraftSerializer,
    PermissionSerializer,
)
from .services import (
    catalog_codes,
    check_permission,
    get_actor,
    load_page_settings,
    load_page_settings_draft,
    load_permission_draft,
    navigation_for,
    save_page_settings_draft,
    save_permission_draft,
)


def _role_value(actor) -> str | None:
    return str(actor.role) if actor.role is not None else None


def _save_response(result: SaveResult):
    """200 when every row applied, otherwise 503 with the per-row report."""
    if result.ok:
        return api_response(result.as_dict())
    return api_response(
        result.as_dict(),
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
        errors=["Some changes could not be saved. Reload to see the current state."],
    )


class NavigationView(BaseAPIView):
    """Pages the caller's role sees in navigation."""

    permission_classes = [RolePermissionRequired]
    action_permissions = {"get": None}

    def get(self, request):
        actor = get_actor(request)
        pages = navigation_for(actor)
        return api_response({
            "role": _role_value(actor),
            "pages": NavigationEntrySerializer(pages, many=True).data,
        })


class PermissionCheckView(BaseAPIView):
    """Answer "may I?" for one permission code, for gating UI actions."""

    permission_classes = [RolePermissionRequired]
    action_permissions = {"get": None}

    def get(self, request):
        code = request.query_params.get("code", "").strip()
        if not code:
            raise ValidationError({"code": "This query parameter is required."})
        actor = get_actor(request)
        return api_response({
            "role": _role_value(actor),
            "code": code,
            "allowed": check_permission(actor.role, code),
        })


class PermissionCatalogView(BaseAPIView):
    permission_classes = [IsRoot]

    def get(self, request):
        return api_response(PermissionSerializer(Permission.objects.all(), many=True).data)


class RolePermissionMatrixView(BaseAPIView):
    """Full role x catalog grid as a freshly loaded draft."""

    permission_classes = [IsRoot]

    def get(self, request):
        draft = load_permission_draft()
        return api_response({
            "loaded_at": draft.loaded_at,
            "roles": [role.value for role in ALL_ROLES],
            "permissions": {format_permission_key(key): value for key, value in draft.committed.items()},
        })


class RolePermissionSaveView(BaseAPIView):
    permission_classes = [IsRoot]

    def post(self, request):
        serializer = PermissionDraftSerializer(
            data=request.data, context={"catalog_codes": catalog_codes()}
        )
        serializer.is_valid(raise_exception=True)
        draft = load_permission_draft(serializer.validated_data["loaded_at"]).with_values(
            serializer.validated_data["permissions"]
        )
        result = save_permission_draft(get_actor(request), draft, request=request)
        return _save_response(result)


class PageSettingsView(BaseAPIView):
    permission_classes = [RolePermissionRequired]
    action_permissions = {"get": MANAGE_PAGE_SETTINGS}

    def get(self, request):
        return api_response({
            "loaded_at": timezone.now(),
            "settings": PageSettingSerializer(load_page_settings(), many=True).data,
        })


class PageSettingsSaveView(BaseAPIView):
    permission_classes = [RolePermissionRequired]
    action_permissions = {"post": MANAGE_PAGE_SETTINGS}

    def post(self, request):
        committed = load_page_settings_draft()
        serializer = PageSettingsDraftSerializer(
            data=request.data, context={"setting_ids": list(committed.committed)}
        )
        serializer.is_valid(raise_exception=True)
        draft = PageSettingsDraft(committed.committed, committed.edited, serializer.validated_data["loaded_at"])
        for pk, flags in serializer.validated_data["settings"].items():
            draft = draft.with_value(pk, draft.edited[pk].replace(**flags))
        result = save_page_settings_draft(get_actor(request), draft, request=request)
        return _save_response(result)


__all__ = [
    "NavigationView",
    "PermissionCheckView",
    "PermissionCatalogView",
    "RolePermissionMatrixView",
    "RolePermissionSaveView",
    "PageSettingsView",
    "PageSettingsSaveView",
]
