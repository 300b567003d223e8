from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from ...auth.context import require_admin, require_user
from ...database.connection import get_async_session
from ...errors import AlreadyVotedError, NotFoundError
from ...logging import get_logger
from ...voting import cast_vote, count_votes, reset_votes
from ..errors import returns_result
from .server import load_server, to_server_type

if TYPE_CHECKING:
    from ..types.results import Outcome, ServerPayload
    from ..types.server import Server

logger = get_logger(__name__)


@returns_result
async def vote(info: strawberry.Info, id: int) -> Outcome:
    """Vote for a published server, at most once per calendar month."""
    auth_context = require_user(info)

    async with get_async_session() as session:
        server = await load_server(session, id)
        if server is None or not server.published:
            raise NotFoundError("Server not found.")

        if not await cast_vote(session, auth_context.user_id, id):
            raise AlreadyVotedError("You have already voted for this server this month.")

    from ..types.results import Outcome

    return Outcome(outcome="Your vote was added.")


@returns_result
async def reset_server_votes(info: strawberry.Info, id: int) -> ServerPayload:
    """Delete all votes of a server. Admin only."""
    require_admin(info)

    async with get_async_session() as session:
        server = await load_server(session, id)
        if server is None:
            raise NotFoundError("Server not found.")

        await reset_votes(session, id)

        from ..types.results import ServerPayload

        return ServerPayload(server=to_server_type(server))


async def resolve_server_vote_count(
    server: Server, info: strawberry.Info, monthly: bool = True
) -> int:
    _ = info

    async with get_async_session() as session:
        return await count_votes(session, server.id, monthly=monthly)
