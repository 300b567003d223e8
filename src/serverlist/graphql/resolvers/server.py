from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...auth.context import AuthContext, get_viewer_context, require_user
from ...catalog import ensure_tags, ensure_version, list_tags, list_versions
from ...database.connection import get_async_session
from ...dbmodels import Servers, Tags, Users, Versions
from ...errors import AuthorizationError, NotFoundError
from ...logging import get_logger
from ...status import ServerStatus, get_status_client
from ...validation import (
    validate_content,
    validate_cover,
    validate_server_fields,
    validate_tags,
    validate_title,
)
from ..errors import returns_result
from .user import to_user_type

if TYPE_CHECKING:
    from ..types.results import ServerPayload
    from ..types.server import Server, Tag, Version
    from ..types.user import User

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def to_server_type(server: Servers) -> Server:
    """Convert a Servers row (tags and version preloaded) into the GraphQL type."""
    from ..types.server import Server as ServerType
    from ..types.server import Tag as TagType
    from ..types.server import Version as VersionType

    return ServerType(
        id=server.id,
        author_id=server.author_id,
        title=server.title,
        content=server.content,
        cover=server.cover,
        ip=server.ip,
        slots=server.slots,
        published=server.published,
        last_updated=server.last_updated,
        created_at=server.created_at,
        tags=[TagType(id=tag.id, name=tag.name) for tag in server.tags],
        version=(
            VersionType(id=server.version.id, name=server.version.name)
            if server.version
            else None
        ),
    )


def _payload(server: Servers) -> ServerPayload:
    from ..types.results import ServerPayload

    return ServerPayload(server=to_server_type(server))


def _can_see(server: Servers, auth_context: AuthContext) -> bool:
    return (
        server.published or server.author_id == auth_context.user_id or auth_context.is_admin
    )


async def fetch_server_status(ip: str) -> ServerStatus:
    """Look up live status; raises unless the server is online."""
    async with get_status_client() as client:
        return await client.get_server_status(ip)


async def load_server(session: AsyncSession, server_id: int) -> Servers | None:
    stmt = (
        select(Servers)
        .where(Servers.id == server_id)
        .options(selectinload(Servers.tags), selectinload(Servers.version))
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_editable_server(
    session: AsyncSession, server_id: int, auth_context: AuthContext
) -> Servers:
    """Load a server the caller may modify: its author or an admin."""
    server = await load_server(session, server_id)
    if server is None:
        raise NotFoundError("Server not found.")

    if server.author_id != auth_context.user_id and not auth_context.is_admin:
        logger.info(
            "Edit denied on server", server_id=server_id, author_id=server.author_id
        )
        raise AuthorizationError("You can only edit your own servers.")

    return server


# Query resolvers
async def resolve_server_by_id(info: strawberry.Info, id: int) -> Server | None:
    """
    Resolve a server by its ID.

    Unpublished servers are only visible to their author and admins.
    """
    auth_context = get_viewer_context(info)

    async with get_async_session() as session:
        server = await load_server(session, id)
        if server is None or not _can_see(server, auth_context):
            return None
        return to_server_type(server)


def page_bounds(limit: int | None, offset: int | None) -> tuple[int, int]:
    """Clamp a requested page to 0..MAX_PAGE_SIZE rows at a non-negative offset."""
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    return max(0, min(limit, MAX_PAGE_SIZE)), max(0, offset or 0)


async def resolve_servers(
    info: strawberry.Info,
    limit: int | None = None,
    offset: int | None = None,
    tag: str | None = None,
    version: str | None = None,
) -> list[Server]:
    """Resolve published servers, newest first, optionally filtered by tag or version."""
    _ = info
    limit, offset = page_bounds(limit, offset)

    async with get_async_session() as session:
        stmt = select(Servers).where(Servers.published)
        if tag:
            stmt = stmt.where(Servers.tags.any(Tags.name == tag))
        if version:
            stmt = stmt.where(Servers.version.has(Versions.name == version))

        stmt = (
            stmt.options(selectinload(Servers.tags), selectinload(Servers.version))
            .order_by(Servers.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await session.execute(stmt)
        return [to_server_type(server) for server in result.scalars().all()]


async def resolve_tags(info: strawberry.Info) -> list[Tag]:
    _ = info
    from ..types.server import Tag as TagType

    async with get_async_session() as session:
        return [TagType(id=tag.id, name=tag.name) for tag in await list_tags(session)]


async def resolve_versions(info: strawberry.Info) -> list[Version]:
    _ = info
    from ..types.server import Version as VersionType

    async with get_async_session() as session:
        return [VersionType(id=v.id, name=v.name) for v in await list_versions(session)]


# Server field resolvers
async def resolve_server_author(server: Server, info: strawberry.Info) -> User:
    _ = info

    async with get_async_session() as session:
        result = await session.execute(select(Users).where(Users.id == server.author_id))
        author = result.scalar_one_or_none()
        if author is None:
            raise RuntimeError("Server author not found")
        return to_user_type(author)


# Mutation resolvers
@returns_result
async def create_server(
    info: strawberry.Info,
    title: str,
    content: str | None,
    cover: str | None,
    tags: list[str],
    ip: str,
) -> ServerPayload:
    """
    Create and publish a server listing.

    The server must be online: its version and slot count come from the
    status API.
    """
    auth_context = require_user(info)
    fields = validate_server_fields(title, content, cover, tags)
    status = await fetch_server_status(ip)

    async with get_async_session() as session:
        tag_rows = await ensure_tags(session, fields["tags"])
        version = await ensure_version(session, status.version) if status.version else None

        server = Servers(
            author_id=auth_context.user_id,
            title=fields["title"],
            content=fields["content"],
            cover=fields["cover"],
            ip=ip,
            version_id=version.id if version else None,
            slots=status.max_players,
            published=True,
            last_updated=datetime.now(UTC),
            tags=tag_rows,
        )
        session.add(server)
        await session.flush()

        created = await load_server(session, server.id)
        logger.info("Server created", server_id=created.id, ip=ip, tags=fields["tags"])
        return _payload(created)


@returns_result
async def update_server(
    info: strawberry.Info,
    id: int,
    title: str,
    content: str | None,
    cover: str | None,
    tags: list[str],
    ip: str,
) -> ServerPayload:
    """Replace every editable field of a listing, refreshing live status from ``ip``."""
    auth_context = require_user(info)
    fields = validate_server_fields(title, content, cover, tags)
    status = await fetch_server_status(ip)

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        tag_rows = await ensure_tags(session, fields["tags"])
        version = await ensure_version(session, status.version) if status.version else None

        server.title = fields["title"]
        server.content = fields["content"]
        server.cover = fields["cover"]
        server.ip = ip
        server.version_id = version.id if version else None
        server.slots = status.max_players
        server.last_updated = datetime.now(UTC)
        server.tags = tag_rows
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Server updated", server_id=id)
        return _payload(updated)


async def _update_fields(info: strawberry.Info, id: int, **changes: object) -> ServerPayload:
    auth_context = require_user(info)

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        for field, value in changes.items():
            setattr(server, field, value)
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Server fields updated", server_id=id, fields=sorted(changes))
        return _payload(updated)


@returns_result
async def update_title(info: strawberry.Info, id: int, title: str) -> ServerPayload:
    return await _update_fields(info, id, title=validate_title(title))


@returns_result
async def update_content(info: strawberry.Info, id: int, content: str) -> ServerPayload:
    return await _update_fields(info, id, content=validate_content(content))


@returns_result
async def update_cover(info: strawberry.Info, id: int, cover: str) -> ServerPayload:
    return await _update_fields(info, id, cover=validate_cover(cover))


@returns_result
async def update_ip(info: strawberry.Info, id: int, ip: str) -> ServerPayload:
    """Point a listing at a new address; the new address must be online."""
    auth_context = require_user(info)

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        await fetch_server_status(ip)
        server.ip = ip
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Server address updated", server_id=id)
        return _payload(updated)


@returns_result
async def delete_server(info: strawberry.Info, id: int) -> ServerPayload:
    """Soft delete: the listing is unpublished, votes and tags are kept."""
    return await _update_fields(info, id, published=False)


@returns_result
async def publish_server(info: strawberry.Info, id: int) -> ServerPayload:
    return await _update_fields(info, id, published=True)


@returns_result
async def add_tags(info: strawberry.Info, id: int, tags: list[str]) -> ServerPayload:
    auth_context = require_user(info)
    names = validate_tags(tags, action="add")

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        existing = {tag.name for tag in server.tags}
        for tag in await ensure_tags(session, names):
            if tag.name not in existing:
                server.tags.append(tag)
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Tags added to server", server_id=id, tags=names)
        return _payload(updated)


@returns_result
async def remove_tag(info: strawberry.Info, id: int, tag: str) -> ServerPayload:
    """Detach one tag by name; removing a tag the server lacks is a no-op."""
    auth_context = require_user(info)
    (name,) = validate_tags([tag], action="remove")

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        server.tags = [t for t in server.tags if t.name != name]
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Tag removed from server", server_id=id, tag=name)
        return _payload(updated)


@returns_result
async def update_remote_info(
    info: strawberry.Info, id: int, ip: str | None = None
) -> ServerPayload:
    """Refresh version, slots and last-updated time from the status API."""
    auth_context = require_user(info)

    async with get_async_session() as session:
        server = await get_editable_server(session, id, auth_context)
        status = await fetch_server_status(ip or server.ip)
        version = await ensure_version(session, status.version) if status.version else None

        server.version_id = version.id if version else None
        server.slots = status.max_players
        server.last_updated = datetime.now(UTC)
        await session.flush()

        updated = await load_server(session, id)
        logger.info("Server remote info refreshed", server_id=id, version=status.version)
        return _payload(updated)
