"""
Digest Commands

Manual trigger, scheduler and previews for the daily news digest.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import click
from tabulate import tabulate

import util
from daily_digest import run_daily_digest
from delivery_ledger import DeliveryLedger
from news_aggregator import NewsAggregator
from scheduler import DigestScheduler
from summarizer import build_summary_prompt
from watchlists import Watchlists


logger = logging.getLogger(__name__)


@click.group()
def digest():
    """Daily news digest"""


@digest.command("run")
@click.pass_context
def run_digest(ctx):
    """Run the daily digest now (same as the scheduled run)"""
    db = ctx.obj["db"]

    try:
        result = run_daily_digest(db)
    except Exception as e:
        logger.error(f"Error running daily digest: {e}", exc_info=True)
        click.secho(f"\n✗ Error running daily digest: {e}\n", fg="red", err=True)
        ctx.exit(1)
        return

    color = "green" if result["success"] else "yellow"
    click.secho(f"\n{result['message']}", fg=color)

    if result["outcomes"]:
        rows = [(o["email"], o["status"], o["reason"]) for o in result["outcomes"]]
        click.echo(tabulate(rows, headers=["Email", "Status", "Reason"], stralign="left"))
    click.echo()

    if result["failed"]:
        ctx.exit(2)


@digest.command("schedule")
@click.option("--at", "send_time", help="Daily send time HH:MM in UTC (default from settings)")
@click.pass_context
def schedule_digest(ctx, send_time):
    """Run the digest every day at a fixed UTC time (blocks)"""
    db = ctx.obj["db"]

    try:
        digest_scheduler = DigestScheduler(db, send_time=send_time)
    except ValueError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        ctx.exit(1)
        return

    click.secho(f"Daily digest scheduled at {digest_scheduler.send_time} UTC (Ctrl+C to stop)", fg="blue")
    try:
        digest_scheduler.run_forever()
    except KeyboardInterrupt:
        digest_scheduler.stop()
        click.echo("Scheduler stopped")


@digest.command("preview")
@click.option("--email", required=True, help="Recipient email")
@click.option("--show-prompt", is_flag=True, help="Print the summarization prompt")
@click.pass_context
def preview_digest(ctx, email, show_prompt):
    """Show the articles a user's digest would contain (no email sent)"""
    db = ctx.obj["db"]

    try:
        aggregator = NewsAggregator()
        symbols = Watchlists(db).list_symbols_by_email(email)
        articles = aggregator.fetch_digest_news_sync(symbols)
        if not articles:
            articles = aggregator.fetch_digest_news_sync([])
    except Exception as e:
        logger.error(f"Error previewing digest: {e}", exc_info=True)
        click.secho(f"\n✗ Error previewing digest: {e}\n", fg="red", err=True)
        ctx.exit(1)
        return

    click.echo(f"\nWatchlist: {', '.join(symbols) if symbols else '(empty, general news)'}")
    rows = [(a.related or "-", a.source, a.headline[:70]) for a in articles]
    click.echo(tabulate(rows, headers=["Symbol", "Source", "Headline"], stralign="left"))

    if show_prompt:
        click.echo()
        click.echo(build_summary_prompt(articles))
    click.echo()


@digest.command("ledger")
@click.option("--date", "digest_date", help="Digest date YYYY-MM-DD (default today, UTC)")
@click.pass_context
def show_ledger(ctx, digest_date):
    """Show delivery ledger entries for a day"""
    db = ctx.obj["db"]
    digest_date = digest_date or util.get_today_string()

    rows = DeliveryLedger(db).entries_for_date(digest_date)
    click.echo(f"\nDeliveries for {digest_date}:")
    if not rows:
        click.echo("No deliveries recorded.")
    else:
        click.echo(tabulate(rows, headers=DeliveryLedger.headers(), stralign="left"))
    click.echo()
