"""OAuth client for the MinecraftItalia forum (authorization code flow)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ..config import settings
from ..errors import ExternalServiceError
from ..logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class OAuthToken:
    access_token: str
    token_type: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None


@dataclass(frozen=True)
class OAuthProfile:
    """Forum member profile as returned by ``/api/core/me``."""

    id: int
    name: str
    email: str | None = None
    photo_url: str | None = None
    posts: int = 0
    primary_group_id: int | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> OAuthProfile:
        primary_group = data.get("primaryGroup") or {}
        return cls(
            id=int(data["id"]),
            name=data.get("name") or "",
            email=data.get("email"),
            photo_url=data.get("photoUrl"),
            posts=int(data.get("posts") or 0),
            primary_group_id=primary_group.get("id"),
        )


class OAuthClient:
    """Exchanges authorization codes and fetches the member profile."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        token_url: str,
        profile_url: str,
        scope: str = "profile",
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.profile_url = profile_url
        self.scope = scope
        self._http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)

    async def exchange_code(self, code: str) -> OAuthToken:
        """Trade an authorization code for a provider access token.

        Raises:
            ExternalServiceError: If the provider is unreachable or refuses the code
        """
        form = {
            "client_id": self.client_id,
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_secret": self.client_secret,
            "scope": self.scope,
            "grant_type": "authorization_code",
        }
        try:
            response = await self._http_client.post(
                self.token_url,
                data={k: v for k, v in form.items() if v is not None},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth token exchange failed", error=str(e))
            raise ExternalServiceError("There was a problem fetching your token.") from e

        if not isinstance(data, dict) or not data.get("access_token"):
            data = data if isinstance(data, dict) else {}
            logger.warning(
                "OAuth provider rejected authorization code",
                status_code=response.status_code,
                error=data.get("error"),
            )
            raise ExternalServiceError(
                "There was a problem fetching your token. "
                f"{data.get('error')} - {data.get('error_description')}"
            )

        return OAuthToken(
            access_token=data["access_token"],
            token_type=data.get("token_type"),
            expires_in=data.get("expires_in"),
            refresh_token=data.get("refresh_token"),
        )

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        """Fetch the member profile for a provider access token.

        Error bodies are read even on non-2xx responses so the provider's
        error code reaches the caller.
        """
        try:
            response = await self._http_client.get(
                self.profile_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth profile fetch failed", error=str(e))
            raise ExternalServiceError("There was a problem fetching your profile.") from e

        if not isinstance(data, dict) or not data.get("id"):
            data = data if isinstance(data, dict) else {}
            logger.warning(
                "OAuth provider returned no profile",
                status_code=response.status_code,
                error_code=data.get("errorCode"),
            )
            raise ExternalServiceError(
                "There was a problem fetching your profile. "
                f"{data.get('errorCode')} - {data.get('errorMessage')}"
            )

        try:
            return OAuthProfile.from_payload(data)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("OAuth provider returned a malformed profile", error=str(e))
            raise ExternalServiceError("There was a problem fetching your profile.") from e

    async def aclose(self) -> None:
        await self._http_client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def get_oauth_client() -> OAuthClient:
    """Build an OAuth client from the current settings."""
    return OAuthClient(
        client_id=settings.oauth_client_id,
        client_secret=settings.oauth_client_secret,
        redirect_uri=settings.oauth_redirect_uri,
        token_url=settings.oauth_token_url,
        profile_url=settings.oauth_profile_url,
        scope=settings.oauth_scope,
    )
