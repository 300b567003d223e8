from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...auth.context import get_viewer_context, require_admin
from ...auth.provisioning import get_user_by_id
from ...database.connection import get_async_session
from ...dbmodels import Servers
from ...errors import NotFoundError
from ...logging import get_logger
from ..errors import returns_result

if TYPE_CHECKING:
    from ...dbmodels import Users
    from ..types.results import UserPayload
    from ..types.server import Server
    from ..types.user import User, UserRole

logger = get_logger(__name__)


def to_user_type(user: Users) -> User:
    """Convert a Users row into the GraphQL type."""
    from ..types.user import User as UserType
    from ..types.user import UserRole

    return UserType(
        id=user.id,
        username=user.username,
        photo_url=user.photo_url,
        email_address=user.email,
        role=UserRole(user.role),
        banned=user.banned,
        posts=user.posts or 0,
        created_at=user.created_at,
    )


async def resolve_user_by_id(info: strawberry.Info, id: int) -> User | None:
    _ = info

    async with get_async_session() as session:
        user = await get_user_by_id(session, id)
        return to_user_type(user) if user else None


def resolve_user_email(user: User, info: strawberry.Info) -> str | None:
    """Email is only shown to the user themselves and to admins."""
    viewer = get_viewer_context(info)
    if viewer.user_id == user.id or viewer.is_admin:
        return user.email_address
    return None


async def resolve_user_servers(user: User, info: strawberry.Info) -> list[Server]:
    _ = info
    from .server import to_server_type

    async with get_async_session() as session:
        stmt = (
            select(Servers)
            .where(Servers.author_id == user.id, Servers.published)
            .options(selectinload(Servers.tags), selectinload(Servers.version))
            .order_by(Servers.created_at.desc())
        )
        result = await session.execute(stmt)
        return [to_server_type(server) for server in result.scalars().all()]


async def _set_user_field(user_id: int, field: str, value: object) -> UserPayload:
    async with get_async_session() as session:
        user = await get_user_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found.")

        setattr(user, field, value)
        await session.flush()
        user_type = to_user_type(user)

    from ..types.results import UserPayload

    return UserPayload(user=user_type)


@returns_result
async def update_role(info: strawberry.Info, id: int, role: UserRole) -> UserPayload:
    """Change a user's role. Admin only."""
    auth_context = require_admin(info)
    payload = await _set_user_field(id, "role", role.value)
    logger.info("User role updated", target_user_id=id, role=role.value, by=auth_context.user_id)
    return payload


@returns_result
async def update_ban(info: strawberry.Info, id: int, banned: bool) -> UserPayload:
    """Ban or unban a user. Admin only.

    Takes effect when the user's access token is next refreshed.
    """
    auth_context = require_admin(info)
    payload = await _set_user_field(id, "banned", banned)
    logger.info("User ban updated", target_user_id=id, banned=banned, by=auth_context.user_id)
    return payload
