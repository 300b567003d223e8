"""JWT access/refresh token issuance and verification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

import jwt
from jwt.exceptions import InvalidTokenError

from ..config import settings
from ..errors import AuthenticationError, ConfigurationError
from ..logging import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

AUTHENTICATION_FAILED = "Could not authenticate user."


class TokenSubject(Protocol):
    """Anything carrying the fields embedded in an access token."""

    id: int
    role: str
    banned: bool


@dataclass(frozen=True)
class AccessClaims:
    """Identity carried by a verified access token."""

    user_id: int
    role: str
    banned: bool


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


class TokenService:
    """Signs and verifies the short-lived access and long-lived refresh tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "serverlist",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
    ):
        if not secret_key:
            raise ConfigurationError("A signing secret is required to issue tokens.")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _encode(self, claims: dict, ttl: timedelta, now: datetime | None) -> tuple[str, datetime]:
        issued_at = now or datetime.now(UTC)
        expires_at = issued_at + ttl
        payload = {
            "iss": self.issuer,
            "iat": issued_at,
            "exp": expires_at,
            **claims,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm), expires_at

    def issue_access_token(self, user: TokenSubject, now: datetime | None = None) -> str:
        token, _ = self._encode(
            {
                "sub": str(user.id),
                "role": user.role,
                "banned": bool(user.banned),
                "type": ACCESS_TOKEN_TYPE,
            },
            self.access_ttl,
            now,
        )
        return token

    def issue_refresh_token(self, user: TokenSubject, now: datetime | None = None) -> str:
        token, _ = self._encode(
            {"sub": str(user.id), "type": REFRESH_TOKEN_TYPE}, self.refresh_ttl, now
        )
        return token

    def issue_pair(self, user: TokenSubject, now: datetime | None = None) -> TokenPair:
        """Issue both tokens for a login or refresh."""
        now = now or datetime.now(UTC)
        access_token = self.issue_access_token(user, now)
        refresh_token = self.issue_refresh_token(user, now)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=now + self.access_ttl,
            refresh_expires_at=now + self.refresh_ttl,
        )

    def _decode(self, token: str | None, expected_type: str) -> dict:
        if not token:
            raise AuthenticationError(AUTHENTICATION_FAILED)

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={
                    "require": ["exp", "iat", "sub"],
                    "verify_exp": True,
                    "verify_iat": True,
                },
            )
        except InvalidTokenError as e:
            logger.warning("Token validation failed", token_type=expected_type, error=str(e))
            raise AuthenticationError(AUTHENTICATION_FAILED) from e

        if payload.get("type") != expected_type:
            logger.warning(
                "Token type mismatch", expected=expected_type, received=payload.get("type")
            )
            raise AuthenticationError(AUTHENTICATION_FAILED)

        try:
            payload["sub"] = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise AuthenticationError(AUTHENTICATION_FAILED) from e

        return payload

    def verify_access_token(self, token: str | None) -> AccessClaims:
        """Verify an access token and return the identity it carries.

        Raises:
            AuthenticationError: If the token is missing, tampered, expired,
                or is not an access token
        """
        payload = self._decode(token, ACCESS_TOKEN_TYPE)
        return AccessClaims(
            user_id=payload["sub"],
            role=payload.get("role", "user"),
            banned=bool(payload.get("banned", False)),
        )

    def verify_refresh_token(self, token: str | None) -> int:
        """Verify a refresh token and return the user id it was issued for."""
        return self._decode(token, REFRESH_TOKEN_TYPE)["sub"]


def get_token_service() -> TokenService:
    """Build a token service from the current settings."""
    return TokenService(
        secret_key=settings.app_secret or "",
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        access_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
        refresh_ttl=timedelta(seconds=settings.refresh_token_ttl_seconds),
    )
