"""Database-backed authorization: actor resolution, checks, and draft saves.

Every call re-reads the rows it needs. Roles and permissions are never
cached across requests, so a revocation takes effect on the next request.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from django.db import DatabaseError, transaction
from django.db.models import Max
from django.utils import timezone

from audit.services import log_action
from members.models import Member

from .catalog import MANAGE_PAGE_SETTINGS
from .drafts import PageFlags, PageSettingsDraft, PermissionDraft, SaveResult, commit_changes
from .exceptions import PermissionNotGranted
from .models import PageSetting, Permission, RolePermission
from .policy import (
    PermissionKey,
    format_permission_key,
    is_allowed,
    require_root,
    visible_page_settings,
)
from .roles import Role, resolve_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """The authenticated account, its freshly loaded member, and their role."""

    account: Any
    member: Member | None
    role: Role | None


def resolve_actor(account) -> Actor:
    """Load the member behind an account and resolve its role."""
    if account is None or not getattr(account, "is_authenticated", False):
        return Actor(account, None, None)
    member = Member.objects.filter(auth_id=account.pk).first()
    if member is None:
        logger.info("Account %s has no member record; treating as unprivileged", account.pk)
    return Actor(account, member, resolve_role(member))


def get_actor(request) -> Actor:
    """Resolve the actor once per request and keep it on the request."""
    actor = getattr(request, "actor", None)
    if actor is None:
        actor = resolve_actor(getattr(request, "user", None))
        request.actor = actor
    return actor


def catalog_codes() -> list[str]:
    return list(Permission.objects.order_by("category", "name").values_list("code", flat=True))


def load_permission_matrix(codes: Iterable[str] | None = None) -> dict[PermissionKey, bool]:
    """Build the (role, code) -> enabled mapping from stored rows.

    Rows whose code has no catalog entry are skipped and logged, so they
    resolve to "denied".
    """
    rows = RolePermission.objects.all()
    catalog = Permission.objects.all()
    if codes is not None:
        codes = list(codes)
        rows = rows.filter(permission_code__in=codes)
        catalog = catalog.filter(code__in=codes)
    known = set(catalog.values_list("code", flat=True))

    matrix: dict[PermissionKey, bool] = {}
    for role, code, enabled in rows.values_list("role", "permission_code", "enabled"):
        if code not in known:
            logger.warning("Ignoring role permission %s-%s: code is not in the catalog", role, code)
            continue
        matrix[(role, code)] = enabled
    return matrix


def check_permission(role, code: str) -> bool:
    """Decide whether ``role`` holds ``code`` right now."""
    if role is None:
        return False
    return is_allowed(load_permission_matrix([code]), role, code)


def require_permission(actor: Actor, code: str) -> None:
    if not check_permission(actor.role, code):
        logger.info("Denied %s to member %s (role=%s)", code, _member_id(actor), actor.role)
        raise PermissionNotGranted()


def load_permission_draft(loaded_at: datetime | None = None) -> PermissionDraft:
    codes = catalog_codes()
    return PermissionDraft.for_catalog(load_permission_matrix(codes), codes, loaded_at)


def save_permission_draft(actor: Actor, draft: PermissionDraft, request=None) -> SaveResult:
    """Persist the changed cells of a permission draft. Root only."""
    require_root(actor.role)
    changes = draft.changes()
    _warn_if_stale(
        "role permissions",
        draft.loaded_at,
        RolePermission.objects.filter(
            permission_code__in={code for (_, code), _ in changes}
        ).aggregate(latest=Max("updated_at"))["latest"],
    )

    def write(key: PermissionKey, enabled: bool) -> None:
        role, code = key
        with transaction.atomic():
            RolePermission.objects.update_or_create(
                role=role, permission_code=code, defaults={"enabled": enabled}
            )

    result = commit_changes(changes, write, catch=(DatabaseError,), label=format_permission_key)

    applied = {row.key for row in result.applied}
    for key, enabled in changes:
        name = format_permission_key(key)
        if name in applied:
            log_action(
                actor.member,
                "update",
                "role_permissions",
                name,
                {"enabled": draft.committed.get(key, False)},
                {"enabled": enabled},
                request=request,
            )
    logger.info("Permission draft saved by %s: %d/%d rows applied",
                _member_id(actor), len(result.applied), len(changes))
    return result


def load_page_settings() -> list[PageSetting]:
    return list(PageSetting.objects.order_by("display_order", "page_key"))


def load_page_settings_draft(loaded_at: datetime | None = None) -> PageSettingsDraft:
    return PageSettingsDraft.for_settings(load_page_settings(), loaded_at)


def save_page_settings_draft(actor: Actor, draft: PageSettingsDraft, request=None) -> SaveResult:
    """Persist changed page visibility rows. Requires ``manage_page_settings``."""
    require_permission(actor, MANAGE_PAGE_SETTINGS)
    changes = draft.changes()
    _warn_if_stale(
        "page settings",
        draft.loaded_at,
        PageSetting.objects.filter(pk__in=[pk for pk, _ in changes]).aggregate(
            latest=Max("updated_at")
        )["latest"],
    )

    def write(pk: int, flags: PageFlags) -> None:
        with transaction.atomic():
            updated = PageSetting.objects.filter(pk=pk).update(
                **flags.as_dict(), updated_at=timezone.now()
            )
        if not updated:
            raise PageSetting.DoesNotExist(f"Page setting {pk} no longer exists")

    result = commit_changes(changes, write, catch=(DatabaseError, PageSetting.DoesNotExist))

    applied = {row.key for row in result.applied}
    for pk, flags in changes:
        if str(pk) in applied:
            log_action(
                actor.member,
                "update",
                "page_settings",
                pk,
                draft.committed[pk].as_dict(),
                flags.as_dict(),
                request=request,
            )
    return result


def navigation_for(actor: Actor) -> list[PageSetting]:
    """Pages the actor's role should see in navigation. Not an access check."""
    return visible_page_settings(PageSetting.objects.filter(is_enabled=True), actor.role)


def _warn_if_stale(what: str, loaded_at: datetime, latest: datetime | None) -> None:
    # Last write wins; a stale draft is only reported.
    if latest is not None and loaded_at < latest:
        logger.warning("Saving %s from a draft loaded at %s; rows changed at %s", what, loaded_at, latest)


def _member_id(actor: Actor) -> str:
    return str(actor.member.pk) if actor.member is not None else "-"


__all__ = [
    "Actor",
    "resolve_actor",
    "get_actor",
    "catalog_codes",
    "load_permission_matrix",
    "check_permission",
    "require_permission",
    "load_permission_draft",
    "save_permission_draft",
    "load_page_settings",
    "load_page_settings_draft",
    "save_page_settings_draft",
    "navigation_for",
]
