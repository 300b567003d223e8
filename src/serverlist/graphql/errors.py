"""
Conversion of domain errors into GraphQL result values
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from ..errors import ServerListError
from ..logging import get_logger
from .types.results import MutationError

logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def to_mutation_error(error: ServerListError) -> MutationError:
    return MutationError(code=error.code, message=error.message)


def returns_result(
    func: Callable[P, Awaitable[R]],
) -> Callable[P, Awaitable[R | MutationError]]:
    """
    Turn ``ServerListError`` raised by a mutation resolver into a ``MutationError``.

    Any other exception is logged and re-raised, so it reaches the client as a
    GraphQL error.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Any:
        try:
            return await func(*args, **kwargs)
        except ServerListError as e:
            logger.info(
                "Mutation rejected", mutation=func.__name__, code=e.code, reason=e.message
            )
            return to_mutation_error(e)
        except Exception:
            logger.exception("Mutation failed unexpectedly", mutation=func.__name__)
            raise

    return wrapper
