"""
``user-settings-migrate``: apply and inspect the settings schema migrations.
"""

import asyncio
import sys
from pathlib import Path

import click
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from user_settings import __version__
from user_settings.database.connection import get_database_url, to_async_url
from user_settings.logging import configure_logging, get_logger

logger = get_logger(__name__)

ALEMBIC_INI = Path(__file__).parent.parent.parent.parent / "alembic.ini"


def get_alembic_config(database_url: str | None = None) -> Config:
    """Load ``alembic.ini``; ``database_url`` overrides the configured database."""
    if not ALEMBIC_INI.exists():
        raise FileNotFoundError(f"alembic.ini not found at {ALEMBIC_INI}")

    config = Config(str(ALEMBIC_INI))
    config.attributes["database_url"] = database_url or get_database_url()
    return config


def head_revision(config: Config) -> str | None:
    return ScriptDirectory.from_config(config).get_current_head()


async def current_revision(database_url: str) -> str | None:
    """Revision stamped in ``alembic_version``, or None for an unmigrated database."""
    engine = create_async_engine(to_async_url(database_url), poolclass=pool.NullPool)
    try:
        async with engine.connect() as conn:
            return await conn.run_sync(
                lambda sync_conn: MigrationContext.configure(sync_conn).get_current_revision()
            )
    finally:
        await engine.dispose()


@click.group()
@click.option(
    "--database-url",
    envvar="USER_SETTINGS_DATABASE_URL",
    help="Database to migrate (default: USER_SETTINGS_DATABASE_URL or settings)",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
)
@click.version_option(version=__version__, prog_name="user-settings-migrate")
@click.pass_context
def main(ctx: click.Context, database_url: str | None, log_level: str) -> None:
    """Manage the users/settings schema."""
    configure_logging(debug=(log_level == "debug"))
    ctx.obj = get_alembic_config(database_url)


@main.command()
@click.argument("revision", default="head")
@click.pass_obj
def upgrade(config: Config, revision: str) -> None:
    """Apply migrations up to REVISION (default: head)."""
    try:
        command.upgrade(config, revision)
    except Exception as e:
        logger.error("Settings schema upgrade failed", revision=revision, error=str(e))
        sys.exit(1)
    logger.info("Settings schema upgraded", revision=revision)


@main.command()
@click.argument("revision", default="-1")
@click.pass_obj
def downgrade(config: Config, revision: str) -> None:
    """Revert migrations down to REVISION (default: one step)."""
    try:
        command.downgrade(config, revision)
    except Exception as e:
        logger.error("Settings schema downgrade failed", revision=revision, error=str(e))
        sys.exit(1)
    logger.info("Settings schema downgraded", revision=revision)


@main.command()
@click.pass_obj
def status(config: Config) -> None:
    """Compare the database revision with the latest migration.

    Exits 1 when the database is behind or unreachable.
    """
    head = head_revision(config)
    try:
        current = asyncio.run(current_revision(config.attributes["database_url"]))
    except Exception as e:
        logger.error("Cannot read settings schema revision", error=str(e))
        sys.exit(1)

    if current == head:
        click.echo(f"Settings schema is up to date ({head})")
        return

    click.echo(f"Settings schema is behind: {current or 'unmigrated'} -> {head}")
    sys.exit(1)


if __name__ == "__main__":
    main()
