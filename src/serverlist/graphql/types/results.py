"""
Mutation payloads and result unions.

Every mutation returns either its payload or a ``MutationError`` so that
expected failures travel as data instead of transport errors.
"""

from typing import Annotated

import strawberry

from .server import Server
from .user import User


@strawberry.type
class MutationError:
    """An expected failure: bad input, missing credentials, unreachable server..."""

    code: str
    message: str


@strawberry.type
class AuthPayload:
    user: User


@strawberry.type
class UserPayload:
    user: User


@strawberry.type
class ServerPayload:
    server: Server


@strawberry.type
class Outcome:
    """Generic success message for mutations that return no entity."""

    outcome: str


AuthResult = Annotated[AuthPayload | MutationError, strawberry.union("AuthResult")]
UserResult = Annotated[UserPayload | MutationError, strawberry.union("UserResult")]
ServerResult = Annotated[ServerPayload | MutationError, strawberry.union("ServerResult")]
OutcomeResult = Annotated[Outcome | MutationError, strawberry.union("OutcomeResult")]
