"""
Tests for building the auth context from the access token cookie
"""

from dataclasses import dataclass

import pytest

from serverlist.auth.context import (
    ANONYMOUS,
    AuthContext,
    get_auth_context,
    get_viewer_context,
    require_admin,
    require_user,
)
from serverlist.errors import AuthenticationError, AuthorizationError
from serverlist.logging import get_user_id


@dataclass
class FakeUser:
    id: int
    role: str = "user"
    banned: bool = False


@pytest.fixture
def info_for(make_info, token_service):
    def _info(user: FakeUser):
        token = token_service.issue_access_token(user)
        return make_info({"accessToken": token})

    return _info


class TestGetAuthContext:
    def test_no_cookie_is_anonymous(self, make_info):
        auth_context = get_auth_context(make_info())
        assert auth_context is ANONYMOUS
        assert not auth_context.is_authenticated

    def test_missing_request_is_anonymous(self, make_info):
        info = make_info()
        info.context = {}
        assert get_auth_context(info) is ANONYMOUS

    def test_valid_cookie(self, info_for):
        auth_context = get_auth_context(info_for(FakeUser(id=12, role="admin")))

        assert auth_context == AuthContext(user_id=12, role="admin", banned=False)
        assert auth_context.is_admin
        assert get_user_id() == "12"

    def test_invalid_cookie_raises(self, make_info):
        with pytest.raises(AuthenticationError):
            get_auth_context(make_info({"accessToken": "garbage"}))


class TestGetViewerContext:
    def test_invalid_cookie_is_anonymous(self, make_info):
        assert get_viewer_context(make_info({"accessToken": "garbage"})) is ANONYMOUS

    def test_valid_cookie(self, info_for):
        assert get_viewer_context(info_for(FakeUser(id=7))).user_id == 7


class TestRequireUser:
    def test_anonymous_rejected(self, make_info):
        with pytest.raises(AuthenticationError, match="Could not authenticate user."):
            require_user(make_info())

    def test_banned_rejected(self, info_for):
        with pytest.raises(AuthorizationError, match="Your account has been banned."):
            require_user(info_for(FakeUser(id=3, banned=True)))

    def test_authenticated(self, info_for):
        assert require_user(info_for(FakeUser(id=3))).user_id == 3


class TestRequireAdmin:
    def test_regular_user_rejected(self, info_for):
        with pytest.raises(AuthorizationError, match="Only administrators can do this."):
            require_admin(info_for(FakeUser(id=4)))

    def test_admin_accepted(self, info_for):
        assert require_admin(info_for(FakeUser(id=4, role="admin"))).is_admin

    def test_banned_admin_rejected(self, info_for):
        with pytest.raises(AuthorizationError):
            require_admin(info_for(FakeUser(id=4, role="admin", banned=True)))
