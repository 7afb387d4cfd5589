#!/usr/bin/env python3
"""
Signalist CLI

Command-line interface built with Click.
Manual digest trigger, scheduler, news preview and data administration.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/cli.py --help
    python src/cli.py digest run
    python src/cli.py watchlist add --email ann@example.com --symbols "AAPL MSFT"
"""

import logging
import sys

import click

# Local application imports
import constants as const
import util
from cli.digest import digest
from cli.news import news
from cli.settings import settings
from cli.users import users
from cli.watchlist import watchlist
from db import Db
from system_settings import SystemSettings


# Initialize logging for CLI application
util.setup_logger(name=None, level="INFO", console=True, log_file=const.CMDS_LOG_FILE)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--in-memory", is_flag=True, help="Use in-memory database (for testing)")
@click.pass_context
def cli(ctx, in_memory):
    """
    Signalist Command Line Interface

    Run the daily news digest, preview news and manage users and watchlists.
    """
    ctx.ensure_object(dict)

    db = Db(in_memory=in_memory)
    ctx.obj["db"] = db

    # Bind the settings singleton to this database
    SystemSettings.reset()

    db_type = "in-memory" if in_memory else f"persistent ({const.DATABASE_PATH})"
    logger.info(f"Initializing Signalist CLI with {db_type} database")


# Register command groups
cli.add_command(digest)
cli.add_command(news)
cli.add_command(users)
cli.add_command(watchlist)
cli.add_command(settings)


@cli.command()
def version():
    """Show version information"""
    click.echo(f"{const.APP_NAME} CLI v{const.VERSION}")


if __name__ == "__main__":
    try:
        cli()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        click.secho(f"\n✗ Fatal error: {e}\n", fg="red", err=True)
        sys.exit(1)
