"""Serializers for the member directory."""

from rest_framework import serializers

from access_control.roles import resolve_role

from .models import Member


class MemberSerializer(serializers.ModelSerializer):
    """Directory entry. Role flags are read-only; they change through the role endpoint."""

    role = serializers.SerializerMethodField()

    class Meta:
        model = Member
        fields = [
            "id",
            "full_name",
            "email",
            "phone",
            "is_admin",
            "is_root",
            "is_active",
            "role",
            "joined_at",
            "updated_at",
        ]
        read_only_fields = ["id", "is_admin", "is_root", "role", "joined_at", "updated_at"]

    def get_role(self, obj) -> str:
        return str(resolve_role(obj))


class RoleChangeSerializer(serializers.Serializer):
    is_admin = serializers.BooleanField()


__all__ = ["MemberSerializer", "RoleChangeSerializer"]
