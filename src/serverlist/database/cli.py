#!/usr/bin/env python3
"""
``serverlist-migrate``: Alembic commands bound to the project's migration scripts.
"""

import sys
from pathlib import Path

import click

from alembic import command
from alembic.config import Config
from serverlist import __version__
from serverlist.logging import configure_logging, get_logger

logger = get_logger(__name__)

PROJECT_DIR = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    """Load alembic.ini from the project root, with scripts under ``alembic/``."""
    alembic_ini = PROJECT_DIR / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_DIR / "alembic"))
    return config


def run_alembic(action: str, *args: str, **kwargs: object) -> None:
    """Run ``alembic.command.<action>``; any failure is logged and exits with status 1."""
    logger.info("Running migration command", action=action, args=args, options=kwargs)
    try:
        getattr(command, action)(get_alembic_config(), *args, **kwargs)
    except Exception as e:
        logger.error("Migration command failed", action=action, error=str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.version_option(version=__version__, prog_name="serverlist-migrate")
def main(log_level: str) -> None:
    """Server list database migration management."""
    configure_logging(debug=(log_level == "debug"))


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    run_alembic("upgrade", revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    run_alembic("downgrade", revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Auto-generate migration")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    run_alembic("revision", message=message, autogenerate=autogenerate)


@main.command()
def current() -> None:
    """Show current database revision."""
    run_alembic("current")


@main.command()
def history() -> None:
    """Show migration history."""
    run_alembic("history")


if __name__ == "__main__":
    main()
