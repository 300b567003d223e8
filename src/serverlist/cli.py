#!/usr/bin/env python3
"""
Main CLI entry point for the server list backend.
"""

import os
import sys

import click
import uvicorn

from serverlist import __version__
from serverlist.auth.context import ROLES
from serverlist.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="serverlist")
def cli() -> None:
    """Server list CLI - run the API and manage users."""
    pass


@cli.command()
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    default=4000,
    type=int,
    help="Port to bind to (default: 4000)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.option(
    "--workers",
    default=1,
    type=int,
    help="Number of worker processes (default: 1)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(
    host: str,
    port: int,
    reload: bool,
    workers: int,
    log_level: str,
) -> None:
    """Start the server list API."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting server list API",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Worker processes re-import the app and read settings from the environment
    if log_level == "debug":
        os.environ["SERVERLIST_DEBUG"] = "true"
        os.environ["SERVERLIST_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("SERVERLIST_DEBUG", "false")
        os.environ.setdefault("SERVERLIST_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "serverlist.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from serverlist.api.app import app

            uvicorn.run(
                app,
                host=host,
                port=port,
                log_level=log_level,
                access_log=True,
            )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("set-role")
@click.argument("user_id", type=int)
@click.argument("role", type=click.Choice(sorted(ROLES)))
def set_role(user_id: int, role: str) -> None:
    """Set a user's role, e.g. to bootstrap the first admin."""
    import asyncio

    from serverlist.auth.provisioning import get_user_by_id
    from serverlist.database.connection import get_async_session

    configure_logging()

    async def do_set_role() -> bool:
        async with get_async_session() as db:
            user = await get_user_by_id(db, user_id)
            if user is None:
                return False
            user.role = role
            return True

    try:
        found = asyncio.run(do_set_role())
    except Exception as e:
        logger.error("Failed to set role", user_id=user_id, error=str(e))
        click.echo(f"✗ Error setting role: {e}", err=True)
        sys.exit(1)

    if not found:
        click.echo(f"✗ User {user_id} not found. They must sign in once first.", err=True)
        sys.exit(1)

    logger.info("User role set", user_id=user_id, role=role)
    click.echo(f"✓ User {user_id} is now '{role}'")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
