"""
News Provider Abstract Base Class

Defines the interface the digest pipeline uses to pull market news.
Keeps the aggregation logic independent of the upstream vendor so tests
and alternative feeds can be swapped in.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from abc import ABC, abstractmethod

from news_models import RawNewsItem


class NewsProvider(ABC):
    """Abstract base class for news providers."""

    @abstractmethod
    def get_company_news(self, symbol: str, from_date: str, to_date: str) -> list[RawNewsItem]:
        """
        Get company-specific news for a ticker within a date window.

        Args:
            symbol: Uppercase ticker symbol (e.g., 'AAPL')
            from_date: Window start, YYYY-MM-DD
            to_date: Window end, YYYY-MM-DD

        Returns:
            Raw articles in upstream order (assumed newest first)

        Raises:
            Exception: If the request or payload fails
        """

    @abstractmethod
    def get_general_news(self, category: str = "general") -> list[RawNewsItem]:
        """
        Get general market news.

        Args:
            category: Feed category (default 'general')

        Returns:
            Raw articles in upstream order

        Raises:
            Exception: If the request or payload fails
        """
