"""DRF authenticator that trusts the account attached by ``JWTAuthMiddleware``.

Bearer tokens are verified once, in middleware. DRF only needs to learn which
account (if any) the middleware resolved so that permission classes see it as
``request.user`` and unauthenticated calls are answered with 401.
"""

from typing import Any, Optional, Tuple

from rest_framework.authentication import BaseAuthentication


class MiddlewareUserAuthentication(BaseAuthentication):
    """Expose the middleware-resolved account on the DRF request."""

    def authenticate(self, request) -> Optional[Tuple[Any, None]]:
        django_request = getattr(request, "_request", None)
        account = getattr(django_request, "user", None)
        if account is None or not getattr(account, "is_authenticated", False):
            return None
        return account, None

    def authenticate_header(self, request) -> str:
        # A non-empty challenge makes DRF answer NotAuthenticated with 401.
        return 'Bearer realm="api"'


__all__ = ["MiddlewareUserAuthentication"]
