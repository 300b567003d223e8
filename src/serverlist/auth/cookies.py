"""HTTP-only cookie transport for the auth tokens."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from fastapi import Request, Response

from ..config import settings
from .tokens import TokenPair

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _set(response: Response, name: str, value: str, expires: datetime) -> None:
    response.set_cookie(
        key=name,
        value=value,
        expires=expires,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,  # type: ignore[arg-type]
        domain=settings.cookie_domain,
        path="/",
    )


def set_auth_cookies(response: Response, tokens: TokenPair) -> None:
    """Attach both tokens, each expiring together with the token it carries."""
    _set(response, ACCESS_TOKEN_COOKIE, tokens.access_token, tokens.access_expires_at)
    _set(response, REFRESH_TOKEN_COOKIE, tokens.refresh_token, tokens.refresh_expires_at)


def clear_auth_cookies(response: Response, now: datetime | None = None) -> None:
    """Overwrite both cookies with empty values that expired a day ago.

    This only tells the browser to drop them; a token copied elsewhere stays
    valid until its own expiry.
    """
    yesterday = (now or datetime.now(UTC)) - timedelta(days=1)
    _set(response, ACCESS_TOKEN_COOKIE, "", yesterday)
    _set(response, REFRESH_TOKEN_COOKIE, "", yesterday)


def read_cookie(request: Request, name: str) -> str | None:
    """Read a cookie from the request's Cookie header, treating empty as absent."""
    return request.cookies.get(name) or None
