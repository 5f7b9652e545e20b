#!/usr/bin/env python3
"""
Main CLI entry point for the user settings service.
"""

import asyncio
import os
import sys

import click
import uvicorn

from user_settings import __version__
from user_settings.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="user-settings")
def cli() -> None:
    """User settings CLI - run the server and manage users."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8090, type=int, help="Port to bind to (default: 8090)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--workers", default=1, type=int, help="Number of worker processes (default: 1)"
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the user settings API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting user settings API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Picked up by the app's Settings when it is imported by uvicorn
    if log_level == "debug":
        os.environ["USER_SETTINGS_DEBUG"] = "true"
        os.environ["USER_SETTINGS_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("USER_SETTINGS_DEBUG", "false")
        os.environ.setdefault("USER_SETTINGS_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "user_settings.api.app:app",
            host=host,
            port=port,
            reload=reload,
            workers=(workers if not reload else 1),  # reload doesn't work with multiple workers
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.group()
def user() -> None:
    """Manage user accounts in the database."""
    pass


@user.command("create")
@click.option("--email", required=True, help="Email address of the user")
@click.option(
    "--role",
    default="MEMBER",
    type=click.Choice(["ADMIN", "MEMBER"]),
    help="Role of the user (default: MEMBER)",
)
@click.option("--id", "user_id", default=None, help="Explicit user ID (generated if omitted)")
def create_user(email: str, role: str, user_id: str | None) -> None:
    """Create a user account."""
    from user_settings.database.connection import get_async_session
    from user_settings.dbmodels import UserRole, Users, new_id

    configure_logging()

    async def do_create():
        async with get_async_session() as db:
            new_user = Users(id=user_id or new_id(), email=email, role=UserRole(role))
            db.add(new_user)
            await db.flush()
            return new_user.id

    try:
        created_id = asyncio.run(do_create())
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        click.echo(f"✗ Error creating user: {e}", err=True)
        sys.exit(1)

    logger.info("User created", user_id=created_id, role=role)
    click.echo(f"✓ User created: {created_id}")
    click.echo(f"  Email: {email}")
    click.echo(f"  Role: {role}")


@user.command("list")
def list_users() -> None:
    """List user accounts with their settings counts."""
    from sqlalchemy import func, select

    from user_settings.database.connection import get_async_session
    from user_settings.dbmodels import Settings, Users

    configure_logging()

    async def do_list():
        async with get_async_session() as db:
            stmt = (
                select(Users, func.count(Settings.id))
                .outerjoin(Settings, Settings.user_id == Users.id)
                .group_by(Users.id)
                .order_by(Users.created_at)
            )
            result = await db.execute(stmt)
            return result.all()

    try:
        rows = asyncio.run(do_list())
    except Exception as e:
        logger.error("Failed to list users", error=str(e))
        click.echo(f"✗ Error listing users: {e}", err=True)
        sys.exit(1)

    if not rows:
        click.echo("No users found.")
        return

    click.echo(f"Found {len(rows)} user(s):")
    click.echo()
    for u, settings_count in rows:
        click.echo(f"  ID: {u.id}")
        click.echo(f"  Email: {u.email}")
        click.echo(f"  Role: {u.role.value}")
        click.echo(f"  Settings: {settings_count}")
        click.echo(f"  Created: {u.created_at}")
        click.echo()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
