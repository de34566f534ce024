"""Serializers for the permission catalog, matrix drafts, and page settings."""

from rest_framework import serializers

from .models import PageSetting, Permission
from .policy import parse_permission_key


class PermissionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Permission
        fields = ["code", "name", "category", "description"]
        read_only_fields = fields


class PageSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PageSetting
        fields = [
            "id",
            "page_key",
            "page_name",
            "visible_to_admin",
            "visible_to_members",
            "is_enabled",
            "display_order",
            "description",
            "updated_at",
        ]
        read_only_fields = fields


class NavigationEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = PageSetting
        fields = ["page_key", "page_name"]
        read_only_fields = fields


class PermissionDraftSerializer(serializers.Serializer):
    """Edited matrix cells keyed ``role-code``, plus when the draft was loaded.

    Keys are checked against the role vocabulary and the catalog codes passed
    in ``context["catalog_codes"]``.
    """

    loaded_at = serializers.DateTimeField()
    permissions = serializers.DictField(child=serializers.BooleanField(), allow_empty=True)

    def validate_permissions(self, value):
        known = set(self.context.get("catalog_codes", ()))
        edits = {}
        invalid = []
        for raw_key, enabled in value.items():
            try:
                role, code = parse_permission_key(raw_key)
            except ValueError:
                invalid.append(raw_key)
                continue
            if code not in known:
                invalid.append(raw_key)
                continue
            edits[(role, code)] = enabled
        if invalid:
            raise serializers.ValidationError(f"Unknown permission keys: {', '.join(sorted(invalid))}")
        return edits


class PageFlagsSerializer(serializers.Serializer):
    visible_to_admin = serializers.BooleanField(required=False)
    visible_to_members = serializers.BooleanField(required=False)
    is_enabled = serializers.BooleanField(required=False)


class PageSettingsDraftSerializer(serializers.Serializer):
    """Edited page flags keyed by page setting id; omitted flags keep their value."""

    loaded_at = serializers.DateTimeField()
    settings = serializers.DictField(child=PageFlagsSerializer(), allow_empty=True)

    def validate_settings(self, value):
        known = set(self.context.get("setting_ids", ()))
        edits = {}
        invalid = []
        for raw_id, flags in value.items():
            try:
                pk = int(raw_id)
            except (TypeError, ValueError):
                invalid.append(str(raw_id))
                continue
            if pk not in known:
                invalid.append(str(raw_id))
                continue
            edits[pk] = dict(flags)
        if invalid:
            raise serializers.ValidationError(f"Unknown page settings: {', '.join(sorted(invalid))}")
        return edits


__all__ = [
    "PermissionSerializer",
    "PageSettingSerializer",
    "NavigationEntrySerializer",
    "PermissionDraftSerializer",
    "PageSettingsDraftSerializer",
]
