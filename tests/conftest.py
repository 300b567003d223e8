"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
import sys
from collections.abc import AsyncGenerator, Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from psycopg import Connection  # type: ignore[import]
from pytest_postgresql.executor import PostgreSQLExecutor  # type: ignore[import]

# Settings are read at import time, so the signing secret must exist first
os.environ.setdefault("SERVERLIST_APP_SECRET", "test-secret-key-with-enough-entropy-0123456789")
os.environ.setdefault("SERVERLIST_DEBUG", "false")

# Add src directory to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from serverlist.auth.tokens import TokenService  # noqa: E402

TEST_SECRET = os.environ["SERVERLIST_APP_SECRET"]


@dataclass
class TokenUser:
    """Minimal token subject."""

    id: int
    role: str = "user"
    banned: bool = False


@pytest.fixture
def token_service() -> TokenService:
    """A token service signing with the test secret."""
    return TokenService(secret_key=TEST_SECRET)


@pytest.fixture
def make_info():
    """Build a mock GraphQL info whose request carries the given cookies."""

    def _make(cookies: dict[str, str] | None = None) -> MagicMock:
        request = MagicMock()
        request.cookies = cookies or {}
        info = MagicMock()
        info.context = {"request": request, "response": MagicMock()}
        return info

    return _make


@pytest.fixture
def info_as(make_info, token_service):
    """Build a mock GraphQL info authenticated as ``user_id``."""

    def _info(user_id: int, role: str = "user", banned: bool = False) -> MagicMock:
        token = token_service.issue_access_token(TokenUser(id=user_id, role=role, banned=banned))
        return make_info({"accessToken": token})

    return _info


@pytest.fixture
def mock_session() -> AsyncMock:
    """An AsyncSession double; set ``execute.return_value`` per test."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def session_factory(mock_session: AsyncMock) -> MagicMock:
    """Stand-in for ``get_async_session`` yielding ``mock_session``."""
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = mock_session
    factory.return_value.__aexit__.return_value = None
    return factory


@pytest.fixture(scope="function")
def test_database(
    postgresql: Connection[Any],
) -> Generator[tuple[str, str], None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    info = postgresql.info
    dsn = (
        f"postgresql://{info.user}:{getattr(info, 'password', '')}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )
    yield dsn, info.dbname


@pytest.fixture(scope="function")
def alembic_migrate(
    postgresql_proc: PostgreSQLExecutor, test_database: tuple[str, str]
) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    dsn, _ = test_database

    os.environ["SERVERLIST_DATABASE_URL"] = dsn
    cfg = Config(str(Path(__file__).parent.parent / "alembic.ini"))
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest_asyncio.fixture(scope="function")
async def shared_database(
    alembic_migrate: None, test_database: tuple[str, str]
) -> AsyncGenerator[None, None]:
    """Point the shared connection pool at the migrated test database."""
    _ = alembic_migrate
    from serverlist.database.connection import get_async_engine, init_database, reset_database

    dsn, _ = test_database
    reset_database()
    init_database(dsn, force_reinit=True)

    yield

    await get_async_engine().dispose()
    reset_database()


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(  # type: ignore[reportUnknownMemberType]
        "markers", "requires_db: mark test as requiring database connection"
    )
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    """Skip database tests when no local PostgreSQL install is available."""
    _ = config
    if shutil.which("pg_ctl") or shutil.which("pg_config"):
        return
    skip_db = pytest.mark.skip(reason="PostgreSQL binaries not found")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
