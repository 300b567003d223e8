"""User provisioning from the OAuth provider's profile."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Users
from ..logging import get_logger
from .context import USER_ROLE
from .oauth import OAuthProfile

logger = get_logger(__name__)


async def upsert_user_from_profile(db: AsyncSession, profile: OAuthProfile) -> Users:
    """
    Create or refresh the local user for a forum member.

    Keyed by the provider's member id in a single ``INSERT ... ON CONFLICT``
    statement. New users get the default role; existing users keep their role
    and ban flag while their profile fields are refreshed.
    """
    profile_fields = {
        "username": profile.name,
        "photo_url": profile.photo_url,
        "email": profile.email,
        "posts": profile.posts,
    }
    stmt = (
        pg_insert(Users)
        .values(id=profile.id, role=USER_ROLE, **profile_fields)
        .on_conflict_do_update(
            index_elements=[Users.id],
            set_={**profile_fields, "updated_at": func.now()},
        )
        .returning(Users.id)
    )
    await db.execute(stmt)

    result = await db.execute(
        select(Users).where(Users.id == profile.id).execution_options(populate_existing=True)
    )
    user = result.scalar_one()

    logger.info("User signed in via OAuth", user_id=user.id)
    return user


async def get_user_by_id(db: AsyncSession, user_id: int) -> Users | None:
    """Get a user by ID."""
    result = await db.execute(select(Users).where(Users.id == user_id))
    return result.scalar_one_or_none()
