"""Session tokens for member accounts.

A token proves which account is calling and nothing more. The member record
and its role are loaded on every request by the access control layer, so a
demotion or a revoked permission never waits for a token to expire.

Two revocation paths exist:

- single session: the token's ``jti`` goes on the Redis blocklist until the
  token would have expired anyway;
- every session: the account's ``token_version`` is bumped, and tokens whose
  ``ver`` claim no longer matches are refused.

Redis outages fail closed with ``BlocklistUnavailable``.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Tuple

import jwt
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed

from core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


class BlocklistUnavailable(Exception):
    """Raised when Redis blocklist cannot be checked (fail-closed)."""


class TokenService:
    """Issue, verify and revoke account session tokens."""

    ACCESS_TTL = timedelta(minutes=15)
    REFRESH_TTL = timedelta(hours=24)
    ALGORITHM = "HS256"
    BLOCKLIST_PREFIX = "blocklist:token:"

    @classmethod
    def generate_tokens(cls, account) -> Tuple[str, str]:
        """Return an (access, refresh) pair bound to the account's current version."""
        now = datetime.now(timezone.utc)
        return (
            cls._encode(cls._claims(account, "access", now, cls.ACCESS_TTL)),
            cls._encode(cls._claims(account, "refresh", now, cls.REFRESH_TTL)),
        )

    @classmethod
    def _claims(cls, account, token_type: str, issued_at: datetime, ttl: timedelta) -> dict[str, Any]:
        # No role claim: roles are re-read from the member record per request.
        return {
            "sub": str(account.id),
            "jti": str(uuid.uuid4()),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + ttl).timestamp()),
            "ver": account.token_version,
            "type": token_type,
        }

    @classmethod
    def _encode(cls, claims: dict[str, Any]) -> str:
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=cls.ALGORITHM)

    @classmethod
    def decode_token(cls, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """Verify signature and expiry; optionally require ``access`` or ``refresh``."""
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[cls.ALGORITHM])
        except jwt.ExpiredSignatureError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:  # pragma: no cover - simple mapping
            raise AuthenticationFailed("Invalid token") from exc

        if expected_type and payload.get("type") != expected_type:
            raise AuthenticationFailed("Invalid token type")
        return payload

    @staticmethod
    def is_current(payload: dict[str, Any], account) -> bool:
        """False once the account has logged out everywhere since the token was issued."""
        return payload.get("ver") == account.token_version

    @classmethod
    def revoke(cls, token: str) -> None:
        """Blocklist one access token (single-session logout)."""
        payload = cls.decode_token(token, expected_type="access")
        cls.block_token(payload["jti"], payload["exp"])

    @classmethod
    def revoke_all(cls, account) -> None:
        """Invalidate every token issued to the account so far."""
        account.token_version = (account.token_version or 1) + 1
        account.save(update_fields=["token_version", "updated_at"])
        logger.info("Account %s logged out of all sessions", account.pk)

    @classmethod
    def block_token(cls, jti: str, exp: int) -> None:
        """Keep ``jti`` on the blocklist until the token's own expiry."""
        client = get_redis_client()
        ttl_seconds = max(1, exp - int(time.time()))
        try:
            client.setex(f"{cls.BLOCKLIST_PREFIX}{jti}", ttl_seconds, "1")
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while blocklisting") from exc

    @classmethod
    def is_token_blocked(cls, jti: str) -> bool:
        client = get_redis_client()
        try:
            return client.get(f"{cls.BLOCKLIST_PREFIX}{jti}") is not None
        except Exception as exc:  # pragma: no cover - network failure
            raise BlocklistUnavailable("Redis unavailable while checking blocklist") from exc


__all__ = ["TokenService", "BlocklistUnavailable"]
