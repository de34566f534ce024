"""Guarded member mutations: directory edits, role changes and deletion."""

import logging
from typing import Any, Mapping

from django.db import transaction

from access_control.catalog import DELETE_MEMBER, EDIT_MEMBER
from access_control.exceptions import RootMemberProtected, SelfDeleteForbidden, SelfRoleChangeForbidden
from access_control.policy import require_root
from access_control.roles import Role
from access_control.services import Actor, require_permission
from audit.services import log_action

from .models import Member

logger = logging.getLogger(__name__)


_ROLE_FLAGS = frozenset({"is_admin", "is_root"})


def _actor_id(actor: Actor) -> str:
    return str(actor.member.pk) if actor.member is not None else "-"


def _is_self(actor: Actor, target: Member) -> bool:
    return actor.member is not None and actor.member.pk == target.pk


def update_member(actor: Actor, target: Member, data: Mapping[str, Any], request=None) -> Member:
    """Apply directory edits to a member. Requires ``edit_member``.

    Only root may edit a root member. Role flags are never written here;
    they change through ``change_member_role``.
    """
    require_permission(actor, EDIT_MEMBER)
    if target.is_root and actor.role != Role.ROOT:
        raise RootMemberProtected()

    changed = {
        name: value
        for name, value in data.items()
        if name not in _ROLE_FLAGS and getattr(target, name) != value
    }
    if not changed:
        return target

    previous = {name: getattr(target, name) for name in changed}
    with transaction.atomic():
        for name, value in changed.items():
            setattr(target, name, value)
        target.save(update_fields=[*changed, "updated_at"])

    logger.info("Member %s updated %s on member %s", _actor_id(actor), sorted(changed), target.pk)
    log_action(actor.member, "update", "members", target.pk, previous, changed, request=request)
    return target


def change_member_role(actor: Actor, target: Member, *, is_admin: bool, request=None) -> Member:
    """Promote or demote a member's admin flag. Root only.

    Root members and the actor's own record are off limits; ``is_root`` is
    never written here.
    """
    require_root(actor.role)
    if _is_self(actor, target):
        raise SelfRoleChangeForbidden()
    if target.is_root:
        raise RootMemberProtected()

    previous = target.is_admin
    if previous == is_admin:
        return target

    with transaction.atomic():
        target.is_admin = is_admin
        target.save(update_fields=["is_admin", "updated_at"])

    logger.info("Member %s set is_admin=%s on member %s", actor.member.pk, is_admin, target.pk)
    log_action(actor.member, "update", "members", target.pk,
               {"is_admin": previous}, {"is_admin": is_admin}, request=request)
    return target


def delete_member(actor: Actor, target: Member, request=None) -> None:
    """Delete a member record. Requires ``delete_member``; never root or self."""
    require_permission(actor, DELETE_MEMBER)
    if target.is_root:
        raise RootMemberProtected()
    if _is_self(actor, target):
        raise SelfDeleteForbidden()

    snapshot = {"full_name": target.full_name, "email": target.email, "is_admin": target.is_admin}
    target_id = target.pk
    target.delete()

    logger.info("Member %s deleted member %s", actor.member.pk, target_id)
    log_action(actor.member, "delete", "members", target_id, snapshot, None, request=request)


__all__ = ["update_member", "change_member_role", "delete_member"]
