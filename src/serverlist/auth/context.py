"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass

import strawberry

from ..errors import AuthenticationError, AuthorizationError
from ..logging import get_logger, user_id_ctx
from .cookies import ACCESS_TOKEN_COOKIE, read_cookie
from .tokens import get_token_service

logger = get_logger(__name__)

ADMIN_ROLE = "admin"
USER_ROLE = "user"
ROLES = (USER_ROLE, ADMIN_ROLE)


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    user_id: int | None
    role: str | None = None
    banned: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ADMIN_ROLE


ANONYMOUS = AuthContext(user_id=None)


def get_auth_context(info: strawberry.Info) -> AuthContext:
    """
    Build the auth context from the request's access token cookie.

    Returns an anonymous context when no cookie was sent.

    Raises:
        AuthenticationError: If a cookie was sent but does not verify
    """
    request = info.context.get("request")
    if request is None:
        logger.error("Request not found in GraphQL context")
        return ANONYMOUS

    token = read_cookie(request, ACCESS_TOKEN_COOKIE)
    if token is None:
        return ANONYMOUS

    claims = get_token_service().verify_access_token(token)
    user_id_ctx.set(str(claims.user_id))
    return AuthContext(user_id=claims.user_id, role=claims.role, banned=claims.banned)


def get_viewer_context(info: strawberry.Info) -> AuthContext:
    """Auth context for read paths, where a bad cookie just means anonymous."""
    try:
        return get_auth_context(info)
    except AuthenticationError:
        return ANONYMOUS


def require_user(info: strawberry.Info) -> AuthContext:
    """Require an authenticated caller that is not banned."""
    auth_context = get_auth_context(info)
    if not auth_context.is_authenticated:
        raise AuthenticationError("Could not authenticate user.")
    if auth_context.banned:
        raise AuthorizationError("Your account has been banned.")
    return auth_context


def require_admin(info: strawberry.Info) -> AuthContext:
    """Require an authenticated, non-banned admin."""
    auth_context = require_user(info)
    if not auth_context.is_admin:
        raise AuthorizationError("Only administrators can do this.")
    return auth_context
