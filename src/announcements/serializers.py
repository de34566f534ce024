"""Serializers for announcements."""

from rest_framework import serializers

from .models import Announcement


class AnnouncementSerializer(serializers.ModelSerializer):
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Announcement
        fields = ["id", "title", "content", "created_by", "expires_at", "is_active", "created_at", "updated_at"]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]


__all__ = ["AnnouncementSerializer"]
