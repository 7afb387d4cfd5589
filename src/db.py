#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import sqlite3

# Local application imports
import constants as const


# Get a logger instance
logger = logging.getLogger(__name__)

class Db:
    """
    sqlite3 connection shared by the users, watchlist, settings and
    delivery ledger tables.

    Every statement runs inside `with self.connection`, so a failed
    statement is rolled back and a successful one is committed.
    """
    connection: sqlite3.Connection

    def __init__(self, in_memory: bool = False, path: str | None = None) -> None:
        """
        Open the digest database.

        Args:
            in_memory: Use a private in-memory database (tests, CLI --in-memory)
            path: Database file (defaults to const.DATABASE_PATH); ignored when in_memory
        """
        if in_memory:
            logger.info("init in-memory database")
            self.path = ":memory:"
            self.connection = sqlite3.connect(self.path, check_same_thread=False)
            return

        self.path = path or const.DATABASE_PATH
        logger.info(f"init database at {self.path}")
        # The scheduler and the CLI may hold the file at the same time
        self.connection = sqlite3.connect(self.path, timeout=10.0, check_same_thread=False)
        self.connection.execute("PRAGMA journal_mode=WAL")
        logger.info("Database configured with WAL mode and 10s lock timeout")

    def __del__(self) -> None:
        if getattr(self, "connection", None) is not None:
            self.connection.close()

    def _run(self, sql: str, params: tuple | None = None) -> sqlite3.Cursor:
        with self.connection:
            return self.connection.execute(sql, params) if params else self.connection.execute(sql)

    def create_table(self, query: str) -> None:
        """Run a CREATE TABLE / CREATE INDEX statement."""
        try:
            self._run(query)
            logger.debug(f"Table created {query}")
        except sqlite3.Error as e:
            logger.warning(f"Table create error: {e}")
            raise

    def table_exists(self, name: str) -> bool:
        rows = self.query_parameterized(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
        )
        return bool(rows)

    def insert(self, query: str, row: tuple) -> None:
        try:
            self._run(query, row)
        except sqlite3.Error as e:
            logger.warning(f"Error inserting {row}: {e}")
            raise

    def query_parameterized(self, query: str, params: tuple | None = None) -> list[tuple]:
        """
        Execute a SELECT SQL statement with parameters.
        Returns a list of tuples.
        """
        logger.debug(f"Executing query: {query} with params: {params}")
        try:
            with self.connection:
                cur = self.connection.execute(query, params) if params else self.connection.execute(query)
                rows = cur.fetchall()
        except sqlite3.Error as e:
            logger.warning(f"Query {query} failed with error {e}")
            raise
        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def execute(self, query: str, params: tuple | None = None) -> sqlite3.Cursor:
        """
        Execute a non-SELECT statement (UPDATE, DELETE, INSERT OR REPLACE).
        Returns the cursor so callers can read rowcount.
        """
        try:
            cur = self._run(query, params)
        except sqlite3.Error as e:
            logger.warning(f"Execution failed for {query} with error {e}")
            raise
        logger.debug(f"Executed: {query} with params: {params}")
        return cur
