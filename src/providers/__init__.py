"""
News providers.

This package contains provider implementations for fetching market news
from upstream sources (Finnhub).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""
