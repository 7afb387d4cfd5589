"""
News Aggregator - Watchlist-Aware Article Fetcher

Builds the capped, deduplicated article list used by the dashboard news
widget and the daily digest email.

- Symbols given: company news per symbol (trailing window), fetched
  concurrently, interleaved round-robin so no single ticker crowds out
  the others, then sorted newest first.
- No symbols, or nothing usable came back: general market feed,
  deduplicated on id + url + headline, in upstream order.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
import random
import time
from collections.abc import Iterable

import constants as const
import util
from news_models import FormattedNewsItem, RawNewsItem
from providers.finnhub_provider import FinnhubProvider
from providers.news_provider import NewsProvider


logger = logging.getLogger(__name__)


def normalize_symbols(symbols: Iterable[str | None] | None) -> list[str]:
    """Trim and uppercase tickers, dropping blanks and repeats (first occurrence wins)."""
    clean: list[str] = []
    for symbol in symbols or []:
        if not symbol:
            continue
        upper = str(symbol).strip().upper()
        if upper and upper not in clean:
            clean.append(upper)
    return clean


def validate_article(article: RawNewsItem) -> bool:
    """An article is usable only if headline, summary, url and datetime are all truthy."""
    return bool(article.headline and article.summary and article.url and article.datetime)


def truncate_summary(summary: str, max_chars: int) -> str:
    # Ellipsis is appended even when nothing was cut; downstream templates expect it
    return summary.strip()[:max_chars] + const.SUMMARY_ELLIPSIS


def _render_id() -> float:
    return int(time.time() * 1000) + random.random()


def _general_id(article_id: int | str | None, index: int) -> int | float | str:
    if article_id is None:
        return index
    if isinstance(article_id, (int, float)):
        return article_id + index
    return f"{article_id}-{index}"


def format_article(
    article: RawNewsItem,
    is_company_news: bool,
    symbol: str | None = None,
    index: int = 0,
) -> FormattedNewsItem:
    """
    Shape a valid raw article for display / summarization.

    Args:
        article: Raw article (must pass validate_article)
        is_company_news: Company mode (True) or general mode (False)
        symbol: Origin ticker, company mode only
        index: Round index (company) or position (general)

    Returns:
        FormattedNewsItem
    """
    if is_company_news:
        return FormattedNewsItem(
            id=_render_id(),
            headline=article.headline.strip(),
            summary=truncate_summary(article.summary, const.COMPANY_SUMMARY_MAX_CHARS),
            source=article.source or "Company News",
            url=article.url,
            datetime=article.datetime,
            image=article.image or "",
            category="company",
            related=symbol or "",
        )

    return FormattedNewsItem(
        id=_general_id(article.id, index),
        headline=article.headline.strip(),
        summary=truncate_summary(article.summary, const.GENERAL_SUMMARY_MAX_CHARS),
        source=article.source or "Market News",
        url=article.url,
        datetime=article.datetime,
        image=article.image or "",
        category=article.category or const.GENERAL_NEWS_CATEGORY,
        related=article.related or "",
    )


def interleave_company_news(
    symbols: list[str],
    per_symbol: dict[str, list[RawNewsItem]],
    max_articles: int = const.MAX_DIGEST_ARTICLES,
) -> list[FormattedNewsItem]:
    """
    Round-robin pick across symbols, one article per symbol per round.

    Consumes the per-symbol lists (each article is taken at most once).
    Output is in pick order; callers sort by recency afterwards.
    """
    collected: list[FormattedNewsItem] = []

    for round_index in range(max_articles):
        for symbol in symbols:
            queue = per_symbol.get(symbol) or []
            if not queue:
                continue
            article = queue.pop(0)
            if not validate_article(article):
                continue
            collected.append(format_article(article, True, symbol, round_index))
            if len(collected) >= max_articles:
                return collected

    return collected


def sort_by_recency(articles: list[FormattedNewsItem]) -> list[FormattedNewsItem]:
    return sorted(articles, key=lambda article: article.datetime or 0, reverse=True)


def dedupe_general(articles: Iterable[RawNewsItem], cap: int = const.GENERAL_NEWS_DEDUP_CAP) -> list[RawNewsItem]:
    """Valid, unique (id + url + headline) articles in upstream order, at most `cap`."""
    seen: set[str] = set()
    unique: list[RawNewsItem] = []
    for article in articles:
        if not validate_article(article):
            continue
        key = article.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
        if len(unique) >= cap:
            break
    return unique


class NewsAggregator:
    """
    Watchlist-aware news aggregator.

    Holds no state between calls; the provider is resolved lazily so a
    missing API key surfaces as a failure of the call itself.
    """

    def __init__(
        self,
        provider: NewsProvider | None = None,
        max_articles: int = const.MAX_DIGEST_ARTICLES,
        lookback_days: int = const.COMPANY_NEWS_LOOKBACK_DAYS,
    ):
        """
        Initialize news aggregator

        Args:
            provider: News provider (defaults to FinnhubProvider on first use)
            max_articles: Cap on returned articles
            lookback_days: Company news window in days
        """
        self._provider = provider
        self.max_articles = max_articles
        self.lookback_days = lookback_days

    @property
    def provider(self) -> NewsProvider:
        if self._provider is None:
            # Raises ValueError when FINNHUB_API_KEY is missing
            self._provider = FinnhubProvider()
        return self._provider

    async def _fetch_company_news(
        self, provider: NewsProvider, symbol: str, from_date: str, to_date: str
    ) -> list[RawNewsItem]:
        """Valid company articles for one symbol; any failure counts as zero articles."""
        try:
            articles = await asyncio.to_thread(provider.get_company_news, symbol, from_date, to_date)
        except Exception as e:
            logger.error(f"Error fetching company news for {symbol}: {e}")
            return []

        valid = [article for article in articles or [] if validate_article(article)]
        logger.debug(f"{symbol}: {len(valid)} of {len(articles or [])} company articles usable")
        return valid

    async def fetch_company_news(self, symbols: list[str]) -> list[FormattedNewsItem]:
        """Round-robin company news for already-normalized symbols, newest first."""
        provider = self.provider
        from_date, to_date = util.get_date_range(self.lookback_days)

        results = await asyncio.gather(
            *(self._fetch_company_news(provider, symbol, from_date, to_date) for symbol in symbols)
        )
        per_symbol = dict(zip(symbols, results))

        collected = interleave_company_news(symbols, per_symbol, self.max_articles)
        return sort_by_recency(collected)[: self.max_articles]

    async def fetch_general_news(self) -> list[FormattedNewsItem]:
        """General market feed, deduplicated and capped; failures propagate."""
        provider = self.provider
        try:
            articles = await asyncio.to_thread(provider.get_general_news, const.GENERAL_NEWS_CATEGORY)
        except Exception as e:
            logger.error(f"Error fetching general news: {e}")
            raise

        unique = dedupe_general(articles or [], const.GENERAL_NEWS_DEDUP_CAP)
        return [
            format_article(article, False, index=index)
            for index, article in enumerate(unique[: self.max_articles])
        ]

    async def fetch_digest_news(self, symbols: Iterable[str | None] | None = None) -> list[FormattedNewsItem]:
        """
        Fetch news for a set of tickers, falling back to the general feed.

        Args:
            symbols: Zero or more tickers (case and whitespace insensitive)

        Returns:
            At most max_articles formatted items

        Raises:
            ValueError: If no Finnhub API key is configured
            Exception: If the general feed cannot be fetched
        """
        # Resolve first so a configuration error stops the call before any fetch
        self.provider

        clean = normalize_symbols(symbols)
        if clean:
            articles = await self.fetch_company_news(clean)
            if articles:
                logger.info(f"Collected {len(articles)} company articles for {', '.join(clean)}")
                return articles
            logger.info(f"No company news for {', '.join(clean)}, using general feed")

        articles = await self.fetch_general_news()
        logger.info(f"Collected {len(articles)} general market articles")
        return articles

    def fetch_digest_news_sync(self, symbols: Iterable[str | None] | None = None) -> list[FormattedNewsItem]:
        """Blocking variant for the CLI."""
        return asyncio.run(self.fetch_digest_news(symbols))
