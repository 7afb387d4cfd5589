"""
Finnhub News Provider

Implementation of NewsProvider using the Finnhub API.
Provides company news and general market news.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging
from typing import Any

import requests

import constants as const
from news_models import RawNewsItem
from providers.news_provider import NewsProvider


logger = logging.getLogger(__name__)


class FinnhubAPIError(Exception):
    """Transport, HTTP or payload failure talking to Finnhub"""


class FinnhubProvider(NewsProvider):
    """News provider using Finnhub API."""

    BASE_URL = const.FINNHUB_BASE_URL

    def __init__(self, api_key: str | None = None, timeout: int = const.FINNHUB_TIMEOUT_SECONDS):
        """
        Initialize Finnhub provider.

        Args:
            api_key: Finnhub API key (defaults to const.FINNHUB_API_KEY)
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If no API key is configured
        """
        self.api_key = api_key or const.FINNHUB_API_KEY
        if not self.api_key:
            raise ValueError("Finnhub API key not configured")
        self.timeout = timeout
        logger.info("Initialized Finnhub news provider")

    def _make_request(self, endpoint: str, params: dict[str, Any]) -> Any:
        """
        Make HTTP request to Finnhub API with error handling.

        Args:
            endpoint: API endpoint path
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            FinnhubAPIError: If request fails
        """
        params = {**params, "token": self.api_key}
        url = f"{self.BASE_URL}/{endpoint}"

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout:
            logger.error(f"Finnhub API timeout for {endpoint}")
            raise FinnhubAPIError("Finnhub API timeout")
        except requests.exceptions.HTTPError as e:
            if response.status_code == 429:
                logger.error("Finnhub API rate limit exceeded")
                raise FinnhubAPIError("Finnhub API rate limit exceeded")
            logger.error(f"Finnhub API HTTP error: {e}")
            raise FinnhubAPIError(f"Finnhub API error: {e}")
        except ValueError as e:
            logger.error(f"Finnhub API returned invalid JSON for {endpoint}: {e}")
            raise FinnhubAPIError(f"Finnhub API returned invalid JSON: {e}")
        except requests.exceptions.RequestException as e:
            logger.error(f"Finnhub API request failed: {e}", exc_info=True)
            raise FinnhubAPIError(f"Finnhub API request failed: {e}")

    @staticmethod
    def _to_items(payload: Any, endpoint: str) -> list[RawNewsItem]:
        # Finnhub answers news endpoints with a JSON array; anything else is malformed
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise FinnhubAPIError(f"Unexpected payload from {endpoint}: {type(payload).__name__}")
        return [RawNewsItem.from_dict(item) for item in payload if isinstance(item, dict)]

    def get_company_news(self, symbol: str, from_date: str, to_date: str) -> list[RawNewsItem]:
        """
        Get company news for a ticker from Finnhub.

        Args:
            symbol: Ticker symbol
            from_date: Window start, YYYY-MM-DD
            to_date: Window end, YYYY-MM-DD

        Returns:
            List of raw articles

        Raises:
            FinnhubAPIError: If data retrieval fails
        """
        params = {"symbol": symbol, "from": from_date, "to": to_date}
        items = self._to_items(self._make_request("company-news", params), "company-news")
        logger.debug(f"Retrieved {len(items)} company news articles for {symbol} ({from_date}..{to_date})")
        return items

    def get_general_news(self, category: str = const.GENERAL_NEWS_CATEGORY) -> list[RawNewsItem]:
        """
        Get general market news from Finnhub.

        Args:
            category: News category (general, forex, crypto, merger)

        Returns:
            List of raw articles

        Raises:
            FinnhubAPIError: If data retrieval fails
        """
        items = self._to_items(self._make_request("news", {"category": category}), "news")
        logger.debug(f"Retrieved {len(items)} {category} news articles")
        return items
