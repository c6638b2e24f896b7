"""Main CLI entry point for clipstream management commands."""

import click

from clipstream import __version__
from clipstream.cli.commands import database, storage
from clipstream.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="clipstream")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """clipstream management commands.

    \b
    Command Groups:
      db         Database setup
      storage    Blob storage inspection and maintenance
    """
    setup_logging()
    ctx.ensure_object(dict)


cli.add_command(database.db)
cli.add_command(storage.storage)


def main() -> None:
    """Entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
