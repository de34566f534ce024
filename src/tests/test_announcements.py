"""Announcement endpoints: open reads, writes gated by permission codes."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from access_control.models import RolePermission
from announcements.models import Announcement
from audit.models import AuditLog
from tests.utils import FakeRedisMixin, auth_client, create_member, seed_access_control_basics


class AnnouncementTests(FakeRedisMixin, TestCase):
    @classmethod
    def setUpTestData(cls):
        seed_access_control_basics()
        cls.admin = create_member("admin@test.com", full_name="Admin", is_admin=True)
        cls.member = create_member("member@test.com", full_name="Member")

        cls.current = Announcement.objects.create(title="AGM", content="Annual meeting", created_by=cls.admin)
        cls.expired = Announcement.objects.create(
            title="Old",
            content="Gone",
            created_by=cls.admin,
            expires_at=timezone.now() - timedelta(days=1),
        )
        cls.inactive = Announcement.objects.create(
            title="Draft", content="Hidden", created_by=cls.admin, is_active=False
        )

    def test_member_reads_current_announcements(self):
        response = auth_client(self.member).get("/announcements/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual([entry["title"] for entry in response.json()["data"]], ["AGM"])

    def test_reading_requires_token(self):
        self.assertEqual(APIClient().get("/announcements/").status_code, 401)

    def test_admin_creates_announcement(self):
        response = auth_client(self.admin).post(
            "/announcements/", {"title": "Picnic", "content": "Saturday at noon"}, format="json"
        )
        data = response.json()["data"]

        self.assertEqual(response.status_code, 201)
        self.assertEqual(data["created_by"], str(self.admin.pk))
        created = Announcement.objects.get(pk=data["id"])
        self.assertEqual(created.created_by, self.admin)

        entry = AuditLog.objects.get(table_name="announcements", action_type="create")
        self.assertEqual(entry.record_id, str(created.pk))

    def test_member_cannot_create_announcement(self):
        response = auth_client(self.member).post(
            "/announcements/", {"title": "Spam", "content": "Spam"}, format="json"
        )
        body = response.json()

        self.assertEqual(response.status_code, 403)
        self.assertIsNone(body["data"])
        self.assertFalse(Announcement.objects.filter(title="Spam").exists())

    def test_admin_edits_inactive_announcement(self):
        response = auth_client(self.admin).patch(
            f"/announcements/{self.inactive.pk}/", {"is_active": True}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.inactive.refresh_from_db()
        self.assertTrue(self.inactive.is_active)

    def test_member_delete_follows_matrix(self):
        client = auth_client(self.member)

        self.assertEqual(client.delete(f"/announcements/{self.current.pk}/").status_code, 403)

        RolePermission.objects.create(role="member", permission_code="delete_announcement", enabled=True)

        self.assertEqual(client.delete(f"/announcements/{self.current.pk}/").status_code, 204)
        self.assertFalse(Announcement.objects.filter(pk=self.current.pk).exists())
        self.assertTrue(AuditLog.objects.filter(table_name="announcements", action_type="delete").exists())

    def test_admin_edit_is_audited(self):
        response = auth_client(self.admin).patch(
            f"/announcements/{self.current.pk}/", {"title": "AGM moved"}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        entry = AuditLog.objects.get(table_name="announcements", action_type="update")
        self.assertEqual(entry.member, self.admin)
        self.assertEqual(entry.old_values, {"title": "AGM"})
        self.assertEqual(entry.new_values, {"title": "AGM moved"})
