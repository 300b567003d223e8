"""
Tests for JWT access and refresh tokens
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from serverlist.auth.tokens import TokenService
from serverlist.errors import AuthenticationError, ConfigurationError


@dataclass
class FakeUser:
    id: int = 42
    role: str = "user"
    banned: bool = False


class TestTokenService:
    def test_requires_secret(self):
        with pytest.raises(ConfigurationError):
            TokenService(secret_key="")

    def test_access_token_round_trip(self, token_service):
        token = token_service.issue_access_token(FakeUser(id=7, role="admin"))

        claims = token_service.verify_access_token(token)

        assert claims.user_id == 7
        assert claims.role == "admin"
        assert claims.banned is False

    def test_banned_flag_is_carried(self, token_service):
        token = token_service.issue_access_token(FakeUser(banned=True))
        assert token_service.verify_access_token(token).banned is True

    def test_refresh_token_round_trip(self, token_service):
        token = token_service.issue_refresh_token(FakeUser(id=99))
        assert token_service.verify_refresh_token(token) == 99

    def test_expired_access_token_rejected(self, token_service):
        issued = datetime.now(UTC) - timedelta(hours=1)
        token = token_service.issue_access_token(FakeUser(), now=issued)

        with pytest.raises(AuthenticationError, match="Could not authenticate user."):
            token_service.verify_access_token(token)

    def test_refresh_token_outlives_access_token(self, token_service):
        issued = datetime.now(UTC) - timedelta(hours=1)
        pair = token_service.issue_pair(FakeUser(id=5), now=issued)

        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(pair.access_token)
        assert token_service.verify_refresh_token(pair.refresh_token) == 5

    def test_pair_expiries(self, token_service):
        now = datetime(2026, 3, 1, tzinfo=UTC)
        pair = token_service.issue_pair(FakeUser(), now=now)

        assert pair.access_expires_at == now + timedelta(minutes=15)
        assert pair.refresh_expires_at == now + timedelta(days=30)

    def test_tampered_signature_rejected(self, token_service):
        token = token_service.issue_access_token(FakeUser())
        header, payload, signature = token.split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"

        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(tampered)

    def test_other_secret_rejected(self, token_service):
        other = TokenService(secret_key="a-different-secret-of-adequate-length-000000")
        token = other.issue_access_token(FakeUser())

        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(token)

    def test_refresh_token_not_accepted_as_access(self, token_service):
        token = token_service.issue_refresh_token(FakeUser())

        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(token)

    def test_access_token_not_accepted_as_refresh(self, token_service):
        token = token_service.issue_access_token(FakeUser())

        with pytest.raises(AuthenticationError):
            token_service.verify_refresh_token(token)

    def test_missing_token_rejected(self, token_service):
        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(None)

    def test_non_numeric_subject_rejected(self, token_service):
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "not-a-number",
                "type": "access",
                "iss": token_service.issuer,
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            token_service.secret_key,
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError):
            token_service.verify_access_token(token)
