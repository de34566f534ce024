"""Announcement endpoints: readable by every account, writable per permission code."""

from rest_framework import viewsets

from access_control.catalog import CREATE_ANNOUNCEMENT, DELETE_ANNOUNCEMENT, EDIT_ANNOUNCEMENT
from access_control.permissions import RolePermissionRequired
from access_control.services import get_actor
from audit.services import log_action
from core.response import BaseViewSet

from .models import Announcement
from .serializers import AnnouncementSerializer


class AnnouncementViewSet(BaseViewSet, viewsets.ModelViewSet):
    serializer_class = AnnouncementSerializer
    permission_classes = [RolePermissionRequired]
    action_permissions = {
        "list": None,
        "retrieve": None,
        "create": CREATE_ANNOUNCEMENT,
        "update": EDIT_ANNOUNCEMENT,
        "partial_update": EDIT_ANNOUNCEMENT,
        "destroy": DELETE_ANNOUNCEMENT,
    }

    def get_queryset(self):
        # Readers only see current announcements; editors work on every row.
        if self.action in ("list", "retrieve"):
            return Announcement.objects.current()
        return Announcement.objects.all()

    def perform_create(self, serializer):
        """Record the acting member as the author."""
        actor = get_actor(self.request)
        announcement = serializer.save(created_by=actor.member)
        log_action(actor.member, "create", "announcements", announcement.pk,
                   None, {"title": announcement.title}, request=self.request)

    def perform_update(self, serializer):
        actor = get_actor(self.request)
        instance = serializer.instance
        previous = {
            name: getattr(instance, name)
            for name, value in serializer.validated_data.items()
            if getattr(instance, name) != value
        }
        announcement = serializer.save()
        if previous:
            log_action(actor.member, "update", "announcements", announcement.pk, previous,
                       {name: getattr(announcement, name) for name in previous}, request=self.request)

    def perform_destroy(self, instance):
        actor = get_actor(self.request)
        snapshot = {"title": instance.title}
        record_id = instance.pk
        instance.delete()
        log_action(actor.member, "delete", "announcements", record_id, snapshot, None, request=self.request)


__all__ = ["AnnouncementViewSet"]
