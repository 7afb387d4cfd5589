#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging

# Third-party imports
from tabulate import tabulate

# Local application imports
from basetableprocessor import BaseTableProcessor
from db import Db
from users import Users


# Get a logger instance
logger = logging.getLogger(__name__)

class Watchlists(BaseTableProcessor):

    def __init__(self, db: Db) -> None:
        super().__init__(db, "watchlist")
        self.users = Users(db)

    def create_table(self) -> None:
        query = """
        CREATE TABLE IF NOT EXISTS watchlist (
            user_id TEXT NOT NULL,
            symbol TEXT NOT NULL,
            company TEXT,
            added_at TEXT DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (user_id, symbol)
        )
        """
        self.db.create_table(query)

    @classmethod
    def headers(cls) -> tuple:
        return ("User ID", "Symbol", "Company", "Added At")

    def select_fields(self) -> str:
        return "user_id, symbol, company, added_at"

    def default_order(self) -> str:
        return "added_at DESC, symbol ASC"

    def add(self, user_id: str, symbol: str, company: str | None = None) -> bool:
        """Add a symbol to the watchlist"""
        symbol = symbol.strip().upper()

        existing = self.query("user_id = ? AND symbol = ?", (user_id, symbol))
        if existing:
            logger.info(f"Symbol {symbol} already in watchlist for {user_id}")
            return False

        query = """
            INSERT INTO watchlist
                (user_id, symbol, company)
                values(?, ?, ?)
            """
        self.db.insert(query, (user_id, symbol, company.strip() if company else None))
        logger.info(f"Added {symbol} to watchlist for {user_id}")
        return True

    def remove(self, user_id: str, symbol: str) -> int:
        """Remove a symbol from the watchlist"""
        cur = self.db.execute(
            "DELETE FROM watchlist WHERE user_id = ? AND symbol = ?",
            (user_id, symbol.strip().upper()),
        )
        logger.info(f"Removed {cur.rowcount} entries for {symbol} from watchlist for {user_id}")
        return cur.rowcount

    def list_symbols(self, user_id: str) -> list[str]:
        """
        Get list of symbols for a user, most recently added first.

        Args:
            user_id: User id

        Returns:
            List of uppercase symbol strings
        """
        rows = self.query("user_id = ?", (user_id,))
        return [str(row[1]).upper() for row in rows]

    def list_symbols_by_email(self, email: str) -> list[str]:
        """
        Resolve a user's watchlist from their email.

        Args:
            email: User email

        Returns:
            Uppercase tickers, or [] when the email is unknown
        """
        user_id = self.users.get_id_by_email(email)
        if not user_id:
            logger.debug(f"No user found for {email}, empty watchlist")
            return []
        return self.list_symbols(user_id)

    def as_symbols_str(self, user_id: str, symbols_per_row: int = 5) -> str:
        """
        Return watchlist as a formatted multi-column string for display.

        Args:
            user_id: User to get watchlist for
            symbols_per_row: Number of symbols to display per row (default: 5)

        Returns:
            Formatted table string ready for display
        """
        symbols = self.list_symbols(user_id)
        if not symbols:
            return "Watchlist is empty."

        table_data = [symbols[i:i + symbols_per_row] for i in range(0, len(symbols), symbols_per_row)]
        table_str = tabulate(table_data, tablefmt="plain", stralign="left")
        return f"Symbols:\n{table_str}"
