"""
Settings Commands

View and change runtime settings (digest model, send time, concurrency...).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import click
from tabulate import tabulate

from system_settings import DIGEST_SETTINGS, get_settings, parse_setting_value


logger = logging.getLogger(__name__)


@click.group()
def settings():
    """System settings"""


@settings.command("list")
@click.option("--stored", is_flag=True, help="Show raw stored rows instead of effective digest settings")
@click.pass_context
def list_settings(ctx, stored):
    """List digest settings (stored value or default)"""
    system_settings = get_settings(ctx.obj["db"])
    if stored:
        click.echo(system_settings.as_str())
        return

    rows = [
        (key, value, "default" if is_default else "set", description)
        for key, value, is_default, description in system_settings.effective_all()
    ]
    click.echo(tabulate(rows, headers=["Key", "Value", "Source", "Description"], stralign="left"))


@settings.command("get")
@click.argument("key")
@click.pass_context
def get_setting(ctx, key):
    """Show one setting"""
    system_settings = get_settings(ctx.obj["db"])
    value = system_settings.effective(key) if key in DIGEST_SETTINGS else system_settings.get(key)
    if value is None:
        click.secho(f"{key} is not set", fg="yellow")
    else:
        click.echo(f"{key} = {value!r}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--category", help="Category (e.g. digest, llm)")
@click.option("--description", help="Description")
@click.pass_context
def set_setting(ctx, key, value, category, description):
    """Set a setting (value type is inferred)"""
    parsed = parse_setting_value(value)
    system_settings = get_settings(ctx.obj["db"])
    if key in DIGEST_SETTINGS and not (category or description):
        system_settings.set_digest_setting(key, parsed, username="cli")
    else:
        category = category or key.split(".", 1)[0]
        system_settings.set(key, parsed, username="cli", category=category, description=description)
    click.secho(f"✓ {key} = {parsed!r}", fg="green")
