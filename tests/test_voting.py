"""
Tests for monthly vote deduplication
"""

from datetime import UTC, datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from serverlist.voting import cast_vote, count_votes, month_window, reset_votes


class TestMonthWindow:
    def test_mid_month(self):
        start, end = month_window(datetime(2026, 4, 17, 13, 45, tzinfo=UTC))

        assert start == datetime(2026, 4, 1, tzinfo=UTC)
        assert end == datetime(2026, 5, 1, tzinfo=UTC)

    def test_december_rolls_over(self):
        start, end = month_window(datetime(2025, 12, 31, 23, 59, tzinfo=UTC))

        assert start == datetime(2025, 12, 1, tzinfo=UTC)
        assert end == datetime(2026, 1, 1, tzinfo=UTC)

    def test_naive_is_treated_as_utc(self):
        start, _ = month_window(datetime(2026, 2, 10))
        assert start == datetime(2026, 2, 1, tzinfo=UTC)

    def test_other_timezone_is_converted(self):
        # 00:30 on March 1st at UTC+2 is still February in UTC
        local = datetime(2026, 3, 1, 0, 30, tzinfo=timezone(timedelta(hours=2)))
        start, end = month_window(local)

        assert start == datetime(2026, 2, 1, tzinfo=UTC)
        assert end == datetime(2026, 3, 1, tzinfo=UTC)


class TestCastVote:
    @pytest.mark.asyncio
    async def test_inserted(self, mock_session):
        mock_session.execute.return_value = MagicMock(rowcount=1)

        assert await cast_vote(mock_session, user_id=1, server_id=2) is True

    @pytest.mark.asyncio
    async def test_duplicate_in_same_month(self, mock_session):
        mock_session.execute.return_value = MagicMock(rowcount=0)

        assert await cast_vote(mock_session, user_id=1, server_id=2) is False

    @pytest.mark.asyncio
    async def test_single_conditional_insert(self, mock_session):
        mock_session.execute.return_value = MagicMock(rowcount=1)

        await cast_vote(mock_session, 1, 2, now=datetime(2026, 4, 17, tzinfo=UTC))

        mock_session.execute.assert_awaited_once()
        stmt = mock_session.execute.await_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert sql.startswith("INSERT INTO votes (author_id, server_id, created_at)")
        assert "SELECT" in sql
        assert "NOT (EXISTS" in sql or "NOT EXISTS" in sql

    @pytest.mark.asyncio
    async def test_next_month_uses_a_fresh_window(self, mock_session):
        mock_session.execute.return_value = MagicMock(rowcount=1)

        await cast_vote(mock_session, 1, 2, now=datetime(2026, 4, 30, 23, 0, tzinfo=UTC))
        await cast_vote(mock_session, 1, 2, now=datetime(2026, 5, 1, 0, 5, tzinfo=UTC))

        april, may = (
            sorted(
                value
                for value in call.args[0].compile(dialect=postgresql.dialect()).params.values()
                if isinstance(value, datetime)
            )
            for call in mock_session.execute.await_args_list
        )
        assert april[0] == datetime(2026, 4, 1, tzinfo=UTC)
        assert april[-1] == datetime(2026, 5, 1, tzinfo=UTC)
        # The May vote only looks for votes from May 1st on
        assert may[0] == datetime(2026, 5, 1, tzinfo=UTC)
        assert may[-1] == datetime(2026, 6, 1, tzinfo=UTC)


class TestCountVotes:
    @pytest.mark.asyncio
    async def test_returns_count(self, mock_session):
        result = MagicMock()
        result.scalar.return_value = 5
        mock_session.execute.return_value = result

        assert await count_votes(mock_session, server_id=2) == 5

    @pytest.mark.asyncio
    async def test_none_is_zero(self, mock_session):
        result = MagicMock()
        result.scalar.return_value = None
        mock_session.execute.return_value = result

        assert await count_votes(mock_session, server_id=2, monthly=False) == 0


class TestResetVotes:
    @pytest.mark.asyncio
    async def test_returns_removed_count(self, mock_session):
        mock_session.execute.return_value = MagicMock(rowcount=3)

        assert await reset_votes(mock_session, server_id=2) == 3
