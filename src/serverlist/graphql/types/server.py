"""
Server listing GraphQL type definitions
"""

from datetime import datetime
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .user import User


@strawberry.type
class Tag:
    """Free-form label attached to servers."""

    id: int
    name: str


@strawberry.type
class Version:
    """Minecraft version string reported by the status API."""

    id: int
    name: str


@strawberry.type
class Server:
    """Server listing type for GraphQL API."""

    id: int
    author_id: int
    title: str
    content: str | None
    cover: str | None
    ip: str
    slots: int | None
    published: bool
    last_updated: datetime | None
    created_at: datetime | None
    tags: list[Tag]
    version: Version | None

    @strawberry.field
    async def author(self, info: strawberry.Info) -> Annotated["User", strawberry.lazy(".user")]:
        """Get the author of this server."""
        from ..resolvers.server import resolve_server_author

        return await resolve_server_author(self, info)

    @strawberry.field
    async def monthly_votes(self, info: strawberry.Info) -> int:
        """Votes received during the current calendar month."""
        from ..resolvers.vote import resolve_server_vote_count

        return await resolve_server_vote_count(self, info, monthly=True)

    @strawberry.field
    async def total_votes(self, info: strawberry.Info) -> int:
        """Votes received since the last reset."""
        from ..resolvers.vote import resolve_server_vote_count

        return await resolve_server_vote_count(self, info, monthly=False)
