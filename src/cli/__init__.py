"""
CLI Module

Modular command-line interface for the Signalist digest using Click.
Each command group is organized into its own module for maintainability.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from cli.digest import digest
from cli.news import news
from cli.settings import settings
from cli.users import users
from cli.watchlist import watchlist


__all__ = ["digest", "news", "settings", "users", "watchlist"]
