"""
User GraphQL type definitions
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated

import strawberry

if TYPE_CHECKING:
    from .server import Server


@strawberry.enum
class UserRole(Enum):
    """Site-wide role of a user."""

    USER = "user"
    ADMIN = "admin"


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: int
    username: str
    photo_url: str | None
    role: UserRole
    banned: bool
    posts: int
    created_at: datetime | None
    email_address: strawberry.Private[str | None]

    @strawberry.field
    def email(self, info: strawberry.Info) -> str | None:
        """Contact email, visible to the user and to admins."""
        from ..resolvers.user import resolve_user_email

        return resolve_user_email(self, info)

    @strawberry.field
    async def servers(
        self, info: strawberry.Info
    ) -> list[Annotated["Server", strawberry.lazy(".server")]]:  # noqa: E501
        """Get published servers authored by this user."""
        from ..resolvers.user import resolve_user_servers

        return await resolve_user_servers(self, info)
