"""
Monthly vote deduplication.

A user may vote for a given server once per calendar month (UTC). The check
and the insert are one ``INSERT ... SELECT ... WHERE NOT EXISTS`` statement,
so the database evaluates both together.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, and_, delete, exists, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from .dbmodels import Votes
from .logging import get_logger

logger = get_logger(__name__)


def month_window(now: datetime) -> tuple[datetime, datetime]:
    """Return the first instant of ``now``'s month and of the following month."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    else:
        now = now.astimezone(UTC)

    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


async def cast_vote(
    db: AsyncSession, user_id: int, server_id: int, now: datetime | None = None
) -> bool:
    """
    Record a vote unless one exists for this user and server this month.

    Returns:
        True if the vote was inserted, False if it was a duplicate
    """
    now = now or datetime.now(UTC)
    start, end = month_window(now)

    already_voted = exists().where(
        and_(
            Votes.server_id == server_id,
            Votes.author_id == user_id,
            Votes.created_at >= start,
            Votes.created_at < end,
        )
    )
    stmt = Votes.__table__.insert().from_select(
        ["author_id", "server_id", "created_at"],
        select(
            literal(user_id, Integer),
            literal(server_id, Integer),
            literal(now, DateTime(timezone=True)),
        ).where(~already_voted),
    )

    result = await db.execute(stmt)
    inserted = result.rowcount == 1
    logger.info(
        "Vote recorded" if inserted else "Duplicate vote rejected",
        server_id=server_id,
        voter_id=user_id,
    )
    return inserted


async def count_votes(
    db: AsyncSession, server_id: int, now: datetime | None = None, monthly: bool = True
) -> int:
    """Count votes for a server, limited to the current month by default."""
    stmt = select(func.count(Votes.id)).where(Votes.server_id == server_id)
    if monthly:
        start, end = month_window(now or datetime.now(UTC))
        stmt = stmt.where(Votes.created_at >= start, Votes.created_at < end)

    result = await db.execute(stmt)
    return result.scalar() or 0


async def reset_votes(db: AsyncSession, server_id: int) -> int:
    """Delete every vote for a server and return how many were removed."""
    result = await db.execute(delete(Votes).where(Votes.server_id == server_id))
    logger.info("Votes reset", server_id=server_id, removed=result.rowcount)
    return result.rowcount
