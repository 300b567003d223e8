"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.results import AuthResult, OutcomeResult, ServerResult, UserResult
from ..types.user import UserRole


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Authentication
    @strawberry.mutation(name="oAuthLogin")
    async def oauth_login(self, info: strawberry.Info, code: str) -> AuthResult:
        """Sign in with an OAuth authorization code."""
        from ..resolvers.auth import oauth_login

        return await oauth_login(info, code)

    @strawberry.mutation
    async def refresh(self, info: strawberry.Info) -> AuthResult:
        """Re-issue the auth cookies from the refresh token cookie."""
        from ..resolvers.auth import refresh

        return await refresh(info)

    @strawberry.mutation
    async def logout(self, info: strawberry.Info) -> OutcomeResult:
        """Expire the auth cookies."""
        from ..resolvers.auth import logout

        return await logout(info)

    # User administration
    @strawberry.mutation(name="updateRole")
    async def update_role(self, info: strawberry.Info, id: int, role: UserRole) -> UserResult:
        from ..resolvers.user import update_role

        return await update_role(info, id, role)

    @strawberry.mutation(name="updateBan")
    async def update_ban(self, info: strawberry.Info, id: int, banned: bool) -> UserResult:
        from ..resolvers.user import update_ban

        return await update_ban(info, id, banned)

    # Server mutations
    @strawberry.mutation(name="createServer")
    async def create_server(
        self,
        info: strawberry.Info,
        title: str,
        tags: list[str],
        ip: str,
        content: str | None = None,
        cover: str | None = None,
    ) -> ServerResult:
        """Create and publish a server listing."""
        from ..resolvers.server import create_server

        return await create_server(info, title, content, cover, tags, ip)

    @strawberry.mutation(name="updateServer")
    async def update_server(
        self,
        info: strawberry.Info,
        id: int,
        title: str,
        tags: list[str],
        ip: str,
        content: str | None = None,
        cover: str | None = None,
    ) -> ServerResult:
        """Replace every editable field of a server listing."""
        from ..resolvers.server import update_server

        return await update_server(info, id, title, content, cover, tags, ip)

    @strawberry.mutation(name="updateTitle")
    async def update_title(self, info: strawberry.Info, id: int, title: str) -> ServerResult:
        from ..resolvers.server import update_title

        return await update_title(info, id, title)

    @strawberry.mutation(name="updateContent")
    async def update_content(self, info: strawberry.Info, id: int, content: str) -> ServerResult:
        from ..resolvers.server import update_content

        return await update_content(info, id, content)

    @strawberry.mutation(name="updateCover")
    async def update_cover(self, info: strawberry.Info, id: int, cover: str) -> ServerResult:
        from ..resolvers.server import update_cover

        return await update_cover(info, id, cover)

    @strawberry.mutation(name="addTag")
    async def add_tag(self, info: strawberry.Info, id: int, tags: list[str]) -> ServerResult:
        """Attach tags to a server, creating unknown ones."""
        from ..resolvers.server import add_tags

        return await add_tags(info, id, tags)

    @strawberry.mutation(name="removeTag")
    async def remove_tag(self, info: strawberry.Info, id: int, tag: str) -> ServerResult:
        from ..resolvers.server import remove_tag

        return await remove_tag(info, id, tag)

    @strawberry.mutation(name="updateIp")
    async def update_ip(self, info: strawberry.Info, id: int, ip: str) -> ServerResult:
        from ..resolvers.server import update_ip

        return await update_ip(info, id, ip)

    @strawberry.mutation(name="updateRemoteInfo")
    async def update_remote_info(
        self, info: strawberry.Info, id: int, ip: str | None = None
    ) -> ServerResult:
        """Refresh version and slot count from the status API."""
        from ..resolvers.server import update_remote_info

        return await update_remote_info(info, id, ip)

    @strawberry.mutation(name="deleteServer")
    async def delete_server(self, info: strawberry.Info, id: int) -> ServerResult:
        """Unpublish a server listing."""
        from ..resolvers.server import delete_server

        return await delete_server(info, id)

    @strawberry.mutation(name="publishServer")
    async def publish_server(self, info: strawberry.Info, id: int) -> ServerResult:
        from ..resolvers.server import publish_server

        return await publish_server(info, id)

    # Voting
    @strawberry.mutation
    async def vote(self, info: strawberry.Info, id: int) -> OutcomeResult:
        """Vote for a server (once per calendar month)."""
        from ..resolvers.vote import vote

        return await vote(info, id)

    @strawberry.mutation(name="resetVotes")
    async def reset_votes(self, info: strawberry.Info, id: int) -> ServerResult:
        from ..resolvers.vote import reset_server_votes

        return await reset_server_votes(info, id)
