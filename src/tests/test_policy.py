"""Tests for the pure authorization rules and draft values."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

from django.test import SimpleTestCase
from django.utils import timezone

from access_control.drafts import (
    APPLIED,
    FAILED,
    SKIPPED,
    PageFlags,
    PageSettingsDraft,
    PermissionDraft,
    commit_changes,
)
from access_control.exceptions import RootRequired
from access_control.policy import (
    format_permission_key,
    is_allowed,
    parse_permission_key,
    require_root,
    visible_pages,
)
from access_control.roles import Role, resolve_role


def page(key, name, *, admin=True, members=True, enabled=True, order=0, pk=None):
    return SimpleNamespace(
        pk=pk,
        page_key=key,
        page_name=name,
        visible_to_admin=admin,
        visible_to_members=members,
        is_enabled=enabled,
        display_order=order,
    )


class ResolveRoleTests(SimpleTestCase):
    def test_flags_map_to_one_role(self):
        self.assertEqual(resolve_role(SimpleNamespace(is_root=False, is_admin=False)), Role.MEMBER)
        self.assertEqual(resolve_role(SimpleNamespace(is_root=False, is_admin=True)), Role.ADMIN)
        self.assertEqual(resolve_role(SimpleNamespace(is_root=True, is_admin=False)), Role.ROOT)
        self.assertEqual(resolve_role(SimpleNamespace(is_root=True, is_admin=True)), Role.ROOT)

    def test_no_member_has_no_role(self):
        self.assertIsNone(resolve_role(None))


class IsAllowedTests(SimpleTestCase):
    """Default-deny lookups over a (role, code) matrix."""

    matrix = {
        ("admin", "create_announcement"): True,
        ("member", "view_dues"): True,
        ("member", "manage_dues"): False,
    }

    def test_enabled_row_allows(self):
        self.assertTrue(is_allowed(self.matrix, "admin", "create_announcement"))
        self.assertTrue(is_allowed(self.matrix, Role.MEMBER, "view_dues"))

    def test_missing_row_denies(self):
        self.assertFalse(is_allowed(self.matrix, "member", "delete_announcement"))
        self.assertFalse(is_allowed({}, "root", "view_members"))

    def test_disabled_row_denies(self):
        self.assertFalse(is_allowed(self.matrix, "member", "manage_dues"))

    def test_malformed_inputs_deny_without_raising(self):
        self.assertFalse(is_allowed(self.matrix, None, "view_dues"))
        self.assertFalse(is_allowed(self.matrix, "guest", "view_dues"))
        self.assertFalse(is_allowed(self.matrix, "member", None))
        self.assertFalse(is_allowed(self.matrix, "member", 42))
        self.assertFalse(is_allowed(self.matrix, "member", ""))

    def test_truthy_non_bool_values_do_not_grant(self):
        self.assertFalse(is_allowed({("admin", "view_dues"): "yes"}, "admin", "view_dues"))


class RequireRootTests(SimpleTestCase):
    def test_root_passes(self):
        require_root(Role.ROOT)
        require_root("root")

    def test_other_roles_rejected(self):
        for role in (Role.ADMIN, Role.MEMBER, None, "superuser"):
            with self.subTest(role=role):
                with self.assertRaises(RootRequired):
                    require_root(role)


class PermissionKeyTests(SimpleTestCase):
    def test_format_and_parse(self):
        self.assertEqual(format_permission_key(("admin", "view_dues")), "admin-view_dues")
        self.assertEqual(parse_permission_key("member-view_dues"), ("member", "view_dues"))

    def test_code_may_contain_hyphens(self):
        self.assertEqual(parse_permission_key("root-export-ledger"), ("root", "export-ledger"))

    def test_invalid_keys_rejected(self):
        for raw in ("view_dues", "guest-view_dues", "admin-", "-view_dues"):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    parse_permission_key(raw)


class VisiblePagesTests(SimpleTestCase):
    settings = [
        page("settings", "Page Settings", members=False, order=10),
        page("home", "Home", order=1),
        page("bulk", "Bulk Operations", members=False, order=8),
        page("events", "Events", enabled=False, order=4),
        page("secret", "Root Tools", admin=False, members=False, order=11),
        page("contact", "Contact", order=7),
        page("about", "About", order=7),
    ]

    def test_member_never_sees_hidden_pages(self):
        self.assertEqual(visible_pages(self.settings, Role.MEMBER), ["Home", "About", "Contact"])

    def test_admin_needs_admin_flag(self):
        self.assertEqual(
            visible_pages(self.settings, Role.ADMIN),
            ["Home", "About", "Contact", "Bulk Operations", "Page Settings"],
        )

    def test_root_sees_every_enabled_page(self):
        self.assertEqual(
            visible_pages(self.settings, Role.ROOT),
            ["Home", "About", "Contact", "Bulk Operations", "Page Settings", "Root Tools"],
        )

    def test_disabled_pages_hidden_from_everyone(self):
        for role in Role:
            with self.subTest(role=role):
                self.assertNotIn("Events", visible_pages(self.settings, role))

    def test_no_role_sees_nothing(self):
        self.assertEqual(visible_pages(self.settings, None), [])


class PermissionDraftTests(SimpleTestCase):
    def setUp(self):
        self.loaded_at = timezone.now()
        self.draft = PermissionDraft.for_catalog(
            {("admin", "view_dues"): True, ("member", "view_dues"): True},
            ["view_dues", "manage_dues"],
            self.loaded_at,
        )

    def test_catalog_grid_defaults_missing_rows_to_false(self):
        self.assertEqual(len(self.draft.committed), 6)
        self.assertFalse(self.draft.committed[("root", "manage_dues")])
        self.assertTrue(self.draft.committed[("admin", "view_dues")])
        self.assertFalse(self.draft.has_changes)

    def test_edits_return_new_draft(self):
        edited = self.draft.toggle(("member", "view_dues")).with_value(("admin", "manage_dues"), True)

        self.assertFalse(self.draft.has_changes)
        self.assertEqual(
            edited.changes(),
            [(("admin", "manage_dues"), True), (("member", "view_dues"), False)],
        )
        self.assertEqual(edited.loaded_at, self.loaded_at)

    def test_toggling_back_clears_change(self):
        edited = self.draft.toggle(("member", "view_dues")).toggle(("member", "view_dues"))
        self.assertEqual(edited.changes(), [])

    def test_reset_discards_edits(self):
        edited = self.draft.with_values({("root", "view_dues"): True, ("admin", "view_dues"): False})
        self.assertTrue(edited.has_changes)
        self.assertFalse(edited.reset().has_changes)

    def test_unknown_key_rejected(self):
        with self.assertRaises(KeyError):
            self.draft.with_value(("admin", "launch_rockets"), True)


class PageSettingsDraftTests(SimpleTestCase):
    def test_toggle_flag_records_change(self):
        settings = [page("home", "Home", pk=1), page("bulk", "Bulk", members=False, pk=2)]
        draft = PageSettingsDraft.for_settings(settings, timezone.now() - timedelta(minutes=5))

        edited = draft.toggle(2, "visible_to_members")

        self.assertEqual(
            edited.changes(),
            [(2, PageFlags(visible_to_admin=True, visible_to_members=True, is_enabled=True))],
        )
        self.assertFalse(draft.committed[2].visible_to_members)


class CommitChangesTests(SimpleTestCase):
    """First failure aborts the batch; later rows are skipped, earlier ones stay."""

    def test_all_rows_applied(self):
        written = []
        result = commit_changes(
            [("a", 1), ("b", 2)],
            lambda key, value: written.append((key, value)),
            catch=(RuntimeError,),
        )

        self.assertTrue(result.ok)
        self.assertEqual(written, [("a", 1), ("b", 2)])
        self.assertEqual(result.as_dict()["applied_count"], 2)

    def test_failure_aborts_remaining_rows(self):
        written = []

        def write(key, value):
            if key == "b":
                raise RuntimeError("connection lost")
            written.append(key)

        with self.assertLogs("access_control.drafts", level="ERROR"):
            result = commit_changes([("a", 1), ("b", 2), ("c", 3)], write, catch=(RuntimeError,))

        self.assertFalse(result.ok)
        self.assertEqual(written, ["a"])
        self.assertEqual([row.status for row in result.rows], [APPLIED, FAILED, SKIPPED])
        self.assertEqual(result.rows[1].error, "connection lost")

    def test_unexpected_errors_propagate(self):
        def write(key, value):
            raise ValueError("bug")

        with self.assertRaises(ValueError):
            commit_changes([("a", 1)], write, catch=(RuntimeError,))

    def test_label_names_rows(self):
        result = commit_changes(
            [(("admin", "view_dues"), True)],
            lambda key, value: None,
            catch=(RuntimeError,),
            label=format_permission_key,
        )
        self.assertEqual(result.rows[0].key, "admin-view_dues")
