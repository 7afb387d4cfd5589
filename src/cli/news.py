"""
News Commands

Fetch aggregated market news from the command line.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
import re
from datetime import datetime, timezone

import click
from tabulate import tabulate

from news_aggregator import NewsAggregator


logger = logging.getLogger(__name__)


@click.group()
def news():
    """Market news"""


@news.command("fetch")
@click.option("--symbols", default="", help="Symbol(s) (space or comma separated); empty for general news")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def fetch_news(ctx, symbols, as_json):
    """Fetch the digest news list for a set of symbols"""
    symbols_list = [s for s in re.split(r"[,\s]+", symbols.strip()) if s]

    try:
        articles = NewsAggregator().fetch_digest_news_sync(symbols_list)
    except Exception as e:
        logger.error(f"Error fetching news: {e}", exc_info=True)
        click.secho(f"\n✗ Error fetching news: {e}\n", fg="red", err=True)
        ctx.exit(1)
        return

    if as_json:
        click.echo(json.dumps([a.to_dict() for a in articles], indent=2))
        return

    if not articles:
        click.secho("No news found", fg="yellow")
        return

    rows = []
    for article in articles:
        published = datetime.fromtimestamp(article.datetime, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
        rows.append((published, article.related or "-", article.source, article.headline[:70]))
    click.echo(tabulate(rows, headers=["Published (UTC)", "Symbol", "Source", "Headline"], stralign="left"))
