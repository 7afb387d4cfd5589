"""
Watchlist Management Commands

Commands for managing user watchlists (symbols that drive the news digest).
Uses Click framework for clean, modern CLI interface.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
import re

import click

from users import Users
from watchlists import Watchlists


logger = logging.getLogger(__name__)


def _resolve_user(ctx, email: str) -> str | None:
    user_id = Users(ctx.obj["db"]).get_id_by_email(email)
    if not user_id:
        click.secho(f"\n✗ No user with email {email}\n", fg="red", err=True)
    return user_id


@click.group()
def watchlist():
    """Manage user watchlists"""


@watchlist.command("list")
@click.option("--email", required=True, help="User email")
@click.pass_context
def list_watchlist(ctx, email):
    """List watchlist symbols for a user"""
    watchlists = Watchlists(ctx.obj["db"])
    user_id = _resolve_user(ctx, email)
    if not user_id:
        ctx.exit(1)
        return

    symbols_list = watchlists.list_symbols(user_id)
    if not symbols_list:
        click.echo(f"\n{email}'s watchlist is empty")
        click.secho("\n💡 Tip: Use 'watchlist add' to add symbols", fg="yellow")
        return

    count_str = f"({len(symbols_list)} symbol{'s' if len(symbols_list) != 1 else ''})"
    click.echo(f"\n{email}'s Watchlist {count_str}:")
    click.echo(watchlists.as_symbols_str(user_id, symbols_per_row=5))
    click.echo()


@watchlist.command("add")
@click.option("--email", required=True, help="User email")
@click.option("--symbols", required=True, help="Symbol(s) to add (space or comma separated)")
@click.option("--company", help="Company name (single symbol only)")
@click.pass_context
def add_symbols(ctx, email, symbols, company):
    """Add symbols to watchlist"""
    watchlists = Watchlists(ctx.obj["db"])
    user_id = _resolve_user(ctx, email)
    if not user_id:
        ctx.exit(1)
        return

    symbols_list = [s.upper() for s in re.split(r"[,\s]+", symbols.strip()) if s]
    if len(symbols_list) != 1:
        company = None

    added = []
    skipped = []
    for symbol in symbols_list:
        if watchlists.add(user_id, symbol, company=company):
            added.append(symbol)
        else:
            skipped.append(symbol)

    if added:
        click.secho(f"✓ Added: {', '.join(added)}", fg="green")
    if skipped:
        click.secho(f"⊘ Already in watchlist: {', '.join(skipped)}", fg="yellow")
    if not added and not skipped:
        click.secho("No symbols provided", fg="red")


@watchlist.command("rm")
@click.option("--email", required=True, help="User email")
@click.option("--symbols", required=True, help="Symbol(s) to remove (space or comma separated)")
@click.pass_context
def rm_symbol(ctx, email, symbols):
    """Remove symbol(s) from watchlist"""
    watchlists = Watchlists(ctx.obj["db"])
    user_id = _resolve_user(ctx, email)
    if not user_id:
        ctx.exit(1)
        return

    removed = []
    not_found = []
    for symbol in (s.upper() for s in re.split(r"[,\s]+", symbols.strip()) if s):
        if watchlists.remove(user_id, symbol) > 0:
            removed.append(symbol)
        else:
            not_found.append(symbol)

    if removed:
        click.secho(f"✓ Removed: {', '.join(removed)}", fg="green")
    if not_found:
        click.secho(f"⊘ Not in watchlist: {', '.join(not_found)}", fg="yellow")
    if not removed and not not_found:
        click.secho("No symbols provided", fg="red")
