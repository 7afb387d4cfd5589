"""
User Commands

Manage digest recipients.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import sqlite3

import click

from users import Users


logger = logging.getLogger(__name__)


@click.group()
def users():
    """Manage users"""


@users.command("list")
@click.pass_context
def list_users(ctx):
    """List all users"""
    db = ctx.obj["db"]
    click.echo(Users(db).as_str())


@users.command("add")
@click.option("--email", required=True, help="Email address")
@click.option("--name", required=True, help="Display name")
@click.option("--country", help="Country")
@click.pass_context
def add_user(ctx, email, name, country):
    """Add a user"""
    db = ctx.obj["db"]

    try:
        user_id = Users(db).add(email, name, country=country)
        click.secho(f"✓ Added {email} ({user_id})", fg="green")
    except sqlite3.IntegrityError:
        click.secho(f"⊘ {email} already exists", fg="yellow")
    except Exception as e:
        logger.error(f"Error adding user: {e}", exc_info=True)
        click.secho(f"\n✗ Error adding user: {e}\n", fg="red", err=True)
        ctx.exit(1)


@users.command("rm")
@click.option("--email", required=True, help="Email address")
@click.pass_context
def rm_user(ctx, email):
    """Remove a user"""
    db = ctx.obj["db"]
    count = Users(db).remove(email)
    if count:
        click.secho(f"✓ Removed {email}", fg="green")
    else:
        click.secho(f"⊘ {email} not found", fg="yellow")
