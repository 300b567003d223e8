"""
Integration tests for votes, catalog rows and user provisioning against PostgreSQL
"""

import asyncio
from datetime import UTC, datetime

import pytest
from sqlalchemy import func, select

from serverlist.auth.oauth import OAuthProfile
from serverlist.auth.provisioning import get_user_by_id, upsert_user_from_profile
from serverlist.catalog import ensure_tags, ensure_version
from serverlist.database.connection import get_async_session
from serverlist.dbmodels import Servers, Tags, Users, Versions, Votes
from serverlist.voting import cast_vote, count_votes

MID_MARCH = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
END_OF_MARCH = datetime(2026, 3, 31, 23, 59, tzinfo=UTC)
START_OF_APRIL = datetime(2026, 4, 1, 0, 0, tzinfo=UTC)


async def create_server_row(author_id: int = 1) -> int:
    async with get_async_session() as session:
        session.add(Users(id=author_id, username=f"member-{author_id}", role="user"))
        server = Servers(
            author_id=author_id,
            title="The best survival server",
            ip="play.example.net",
            published=True,
        )
        session.add(server)
        await session.flush()
        return server.id


async def ensure_tags_in_own_session(names: list[str]) -> list[int]:
    async with get_async_session() as session:
        return [tag.id for tag in await ensure_tags(session, names)]


@pytest.mark.integration
@pytest.mark.requires_db
class TestMonthlyVotes:
    @pytest.mark.asyncio
    async def test_second_vote_in_same_month_rejected(self, shared_database):
        server_id = await create_server_row()

        async with get_async_session() as session:
            assert await cast_vote(session, 1, server_id, now=MID_MARCH) is True

        async with get_async_session() as session:
            assert await cast_vote(session, 1, server_id, now=END_OF_MARCH) is False

        async with get_async_session() as session:
            total = await session.scalar(
                select(func.count(Votes.id)).where(Votes.server_id == server_id)
            )
            assert total == 1
            assert await count_votes(session, server_id, now=END_OF_MARCH) == 1

    @pytest.mark.asyncio
    async def test_vote_allowed_again_next_month(self, shared_database):
        server_id = await create_server_row()

        async with get_async_session() as session:
            assert await cast_vote(session, 1, server_id, now=END_OF_MARCH) is True

        async with get_async_session() as session:
            assert await cast_vote(session, 1, server_id, now=START_OF_APRIL) is True

        async with get_async_session() as session:
            assert await count_votes(session, server_id, now=START_OF_APRIL) == 1
            assert await count_votes(session, server_id, monthly=False) == 2


@pytest.mark.integration
@pytest.mark.requires_db
class TestCatalogRows:
    @pytest.mark.asyncio
    async def test_repeated_tag_creation_keeps_one_row(self, shared_database):
        first = await ensure_tags_in_own_session(["creative"])
        second = await ensure_tags_in_own_session(["creative", "pvp"])

        assert second[0] == first[0]
        async with get_async_session() as session:
            names = (await session.scalars(select(Tags.name).order_by(Tags.name))).all()
        assert names == ["creative", "pvp"]

    @pytest.mark.asyncio
    async def test_overlapping_tag_creation_keeps_one_row(self, shared_database):
        async with get_async_session() as session:
            (created,) = await ensure_tags(session, ["minigames"])
            racer = asyncio.create_task(ensure_tags_in_own_session(["minigames"]))
            await asyncio.sleep(0.2)

        assert await racer == [created.id]
        async with get_async_session() as session:
            total = await session.scalar(
                select(func.count(Tags.id)).where(Tags.name == "minigames")
            )
        assert total == 1

    @pytest.mark.asyncio
    async def test_long_reported_version_is_stored(self, shared_database):
        name = "Velocity 3.3.0-SNAPSHOT (git-" + "f" * 200 + ")"

        async with get_async_session() as session:
            version = await ensure_version(session, name)

        async with get_async_session() as session:
            stored = await session.scalar(select(Versions.name).where(Versions.id == version.id))
        assert stored == name


@pytest.mark.integration
@pytest.mark.requires_db
class TestUserProvisioning:
    @pytest.mark.asyncio
    async def test_relogin_keeps_role_and_ban(self, shared_database):
        async with get_async_session() as session:
            user = await upsert_user_from_profile(
                session, OAuthProfile(id=1234, name="Steve", email="steve@example.com", posts=3)
            )
            assert user.role == "user"

        async with get_async_session() as session:
            user = await get_user_by_id(session, 1234)
            user.role = "admin"
            user.banned = True

        async with get_async_session() as session:
            user = await upsert_user_from_profile(
                session, OAuthProfile(id=1234, name="Steve2", email="new@example.com", posts=9)
            )

        assert user.role == "admin"
        assert user.banned is True
        assert user.username == "Steve2"
        assert user.email == "new@example.com"
        assert user.posts == 9
