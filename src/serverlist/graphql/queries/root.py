"""
Root GraphQL query definitions
"""

import strawberry

from ..types.server import Server, Tag, Version
from ..types.user import User


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User | None:
        """Get the current authenticated user."""
        from ..resolvers.auth import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def user(self, info: strawberry.Info, id: int) -> User | None:
        """Get a user by ID."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, id)

    @strawberry.field
    async def server(self, info: strawberry.Info, id: int) -> Server | None:
        """Get a server by ID."""
        from ..resolvers.server import resolve_server_by_id

        return await resolve_server_by_id(info, id)

    @strawberry.field
    async def servers(
        self,
        info: strawberry.Info,
        limit: int | None = 50,
        offset: int | None = 0,
        tag: str | None = None,
        version: str | None = None,
    ) -> list[Server]:
        """Get published servers, newest first."""
        from ..resolvers.server import resolve_servers

        return await resolve_servers(info, limit, offset, tag, version)

    @strawberry.field
    async def tags(self, info: strawberry.Info) -> list[Tag]:
        """Get all known tags."""
        from ..resolvers.server import resolve_tags

        return await resolve_tags(info)

    @strawberry.field
    async def versions(self, info: strawberry.Info) -> list[Version]:
        """Get all known Minecraft versions."""
        from ..resolvers.server import resolve_versions

        return await resolve_versions(info)
