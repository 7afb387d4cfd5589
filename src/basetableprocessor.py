#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

import pandas as pd
from tabulate import tabulate

from db import Db


# Get a logger instance
logger = logging.getLogger(__name__)

class BaseTableProcessor:
    """Shared plumbing for the sqlite-backed tables (users, watchlist, ledger, settings)."""

    def __init__(self, db: Db, tablename: str) -> None:
        self.db = db
        self.tablename = tablename
        self.create_table()

    def create_table(self) -> None:
        raise NotImplementedError("Subclasses should implement this method")

    @classmethod
    def headers(cls) -> tuple:
        raise NotImplementedError("Subclasses should implement this method")

    def select_fields(self) -> str:
        """Column list matching headers(), in order."""
        return "*"

    def default_order(self) -> str | None:
        return None

    def query(self, condition: str | None = None, params: tuple | None = None) -> list[tuple]:
        select = f"SELECT {self.select_fields()} FROM {self.tablename}"
        if condition:
            select = f"{select} WHERE {condition}"
        orderby = self.default_order()
        if orderby:
            select = f"{select} ORDER BY {orderby}"

        logger.debug(f"query select: {select}, params: {params}")
        return self.db.query_parameterized(select, params)

    def count(self) -> int:
        rows = self.db.query_parameterized(f"SELECT COUNT(*) FROM {self.tablename}")
        return int(rows[0][0]) if rows else 0

    def as_df(self, condition: str | None = None, params: tuple | None = None) -> pd.DataFrame:
        results = self.query(condition, params)
        if not results:
            return pd.DataFrame(columns=list(self.headers()))
        return pd.DataFrame(results, columns=list(self.headers()))

    def as_str(self, condition: str | None = None, params: tuple | None = None) -> str:
        df = self.as_df(condition, params)
        if df.empty:
            return "No records found."
        return tabulate(df.values, headers=self.headers(), stralign="left")
