from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...auth.context import get_viewer_context
from ...auth.cookies import (
    REFRESH_TOKEN_COOKIE,
    clear_auth_cookies,
    read_cookie,
    set_auth_cookies,
)
from ...auth.oauth import get_oauth_client
from ...auth.provisioning import get_user_by_id, upsert_user_from_profile
from ...auth.tokens import get_token_service
from ...database.connection import get_async_session
from ...errors import NotFoundError
from ...logging import get_logger
from ..errors import returns_result
from .user import to_user_type

if TYPE_CHECKING:
    from ...dbmodels import Users
    from ..types.results import AuthPayload, Outcome
    from ..types.user import User

logger = get_logger(__name__)


def _issue_cookies(info: strawberry.Info, user: Users) -> None:
    tokens = get_token_service().issue_pair(user)
    set_auth_cookies(info.context["response"], tokens)


@returns_result
async def oauth_login(info: strawberry.Info, code: str) -> AuthPayload:
    """
    Complete the OAuth authorization-code flow.

    Exchanges the code, fetches the forum profile, upserts the local user
    and sets fresh access/refresh cookies.
    """
    async with get_oauth_client() as client:
        token = await client.exchange_code(code)
        profile = await client.fetch_profile(token.access_token)

    async with get_async_session() as session:
        user = await upsert_user_from_profile(session, profile)
        user_type = to_user_type(user)

    _issue_cookies(info, user)

    from ..types.results import AuthPayload

    return AuthPayload(user=user_type)


@returns_result
async def refresh(info: strawberry.Info) -> AuthPayload:
    """Re-issue both cookies from a valid refresh token.

    The access token is rebuilt from the current database row, so role and
    ban changes take effect on refresh.
    """
    token = read_cookie(info.context["request"], REFRESH_TOKEN_COOKIE)
    user_id = get_token_service().verify_refresh_token(token)

    async with get_async_session() as session:
        user = await get_user_by_id(session, user_id)
        if user is None:
            logger.warning("Refresh token for unknown user", user_id=user_id)
            raise NotFoundError("Could not refresh token.")
        user_type = to_user_type(user)

    _issue_cookies(info, user)

    from ..types.results import AuthPayload

    return AuthPayload(user=user_type)


@returns_result
async def logout(info: strawberry.Info) -> Outcome:
    clear_auth_cookies(info.context["response"])

    from ..types.results import Outcome

    return Outcome(outcome="You've been logged out.")


async def resolve_current_user(info: strawberry.Info) -> User | None:
    auth_context = get_viewer_context(info)
    if not auth_context.is_authenticated:
        return None

    async with get_async_session() as session:
        user = await get_user_by_id(session, auth_context.user_id)
        return to_user_type(user) if user else None
