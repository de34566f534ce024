"""Shared helpers for tests (seeding, member creation, fake Redis, clients)."""

from __future__ import annotations

from typing import Dict
from unittest import mock

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from authentication.managers import UserManager
from authentication.services import TokenService
from members.models import Member
from scripts.management.commands.seed_access_control import (
    create_page_settings,
    create_permission_catalog,
    create_role_grants,
)

User = get_user_model()


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


class FakeRedisMixin:
    """Patch the blocklist Redis client with ``FakeRedis`` for a TestCase."""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()


def seed_access_control_basics():
    """Create the default catalog, role grants, and pages.

    Delegates to the helpers used by the ``seed_access_control`` command.
    """
    permissions = create_permission_catalog()
    create_role_grants()
    pages = create_page_settings()
    return permissions, pages


def create_member(
    email: str,
    password: str = "MemberPass123",
    *,
    full_name: str | None = None,
    is_admin: bool = False,
    is_root: bool = False,
    **extra,
) -> Member:
    """Create an account plus its member record."""
    account = User.objects.create(
        email=email,
        password_hash=UserManager.hash_password(password),
    )
    return Member.objects.create(
        auth=account,
        full_name=full_name or email.split("@")[0].title(),
        email=email,
        is_admin=is_admin,
        is_root=is_root,
        **extra,
    )


def auth_client(member_or_account) -> APIClient:
    """Return an APIClient authenticated with a fresh access token."""
    account = getattr(member_or_account, "auth", member_or_account)
    token, _ = TokenService.generate_tokens(account)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client
