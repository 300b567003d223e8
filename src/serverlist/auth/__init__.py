"""Authentication and authorization system for ServerList."""

from .context import (
    AuthContext,
    get_auth_context,
    get_viewer_context,
    require_admin,
    require_user,
)
from .cookies import clear_auth_cookies, set_auth_cookies
from .tokens import AccessClaims, TokenPair, TokenService, get_token_service

__all__ = [
    "AccessClaims",
    "AuthContext",
    "TokenPair",
    "TokenService",
    "clear_auth_cookies",
    "get_auth_context",
    "get_token_service",
    "get_viewer_context",
    "require_admin",
    "require_user",
    "set_auth_cookies",
]
