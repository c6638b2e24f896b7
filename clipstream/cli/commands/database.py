"""Database commands.

Example:
    clipstream db init     # create tables without running migrations
"""

import sys

import click
from sqlalchemy.exc import SQLAlchemyError

from clipstream.cli.utils import coro, error, info, success


@click.group(name="db")
def db() -> None:
    """Database management commands."""


@db.command()
@coro
async def init() -> None:
    """Create every table that does not exist yet.

    Meant for development databases; deployed databases use Alembic
    (``alembic upgrade head``).
    """
    from clipstream.infra.database import close_database, create_tables, engine

    info(f"Connecting to: {engine.url.render_as_string(hide_password=True)}")
    try:
        await create_tables()
    except SQLAlchemyError as e:
        error(f"Failed to create tables: {e}")
        sys.exit(1)
    finally:
        await close_database()
    success("Database tables created")
