"""
Digest Delivery Ledger

Append-only log of digest delivery attempts, one row per recipient per
attempt. Consulted before sending so a re-run on the same day does not
email anyone twice.

Only `sent` rows suppress a resend; `failed` rows are retried. A send
is bounded only by the SMTP socket timeout, so a `failed` row is written
after smtplib gave up, never while a send is still in flight.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import logging

from basetableprocessor import BaseTableProcessor
from db import Db
from news_models import STATUS_SENT, DeliveryOutcome


logger = logging.getLogger(__name__)


class DeliveryLedger(BaseTableProcessor):
    """Per-recipient, per-day delivery log"""

    def __init__(self, db: Db) -> None:
        super().__init__(db, "digest_deliveries")

    def create_table(self) -> None:
        query = """
        CREATE TABLE IF NOT EXISTS digest_deliveries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL,
            digest_date TEXT NOT NULL,
            status TEXT NOT NULL,
            reason TEXT,
            recorded_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
        """
        self.db.create_table(query)
        self.db.create_table(
            "CREATE INDEX IF NOT EXISTS idx_digest_deliveries_email_date "
            "ON digest_deliveries (email, digest_date)"
        )

    @classmethod
    def headers(cls) -> tuple:
        return ("Email", "Date", "Status", "Reason", "Recorded At")

    def select_fields(self) -> str:
        return "email, digest_date, status, reason, recorded_at"

    def default_order(self) -> str:
        return "id ASC"

    def record(self, digest_date: str, outcome: DeliveryOutcome) -> None:
        self.db.insert(
            "INSERT INTO digest_deliveries (email, digest_date, status, reason) VALUES (?, ?, ?, ?)",
            (outcome.email, digest_date, outcome.status, outcome.reason),
        )
        logger.debug(f"Ledger: {outcome.email} {digest_date} {outcome.status}")

    def has_sent(self, email: str, digest_date: str) -> bool:
        rows = self.db.query_parameterized(
            "SELECT 1 FROM digest_deliveries WHERE email = ? AND digest_date = ? AND status = ? LIMIT 1",
            (email, digest_date, STATUS_SENT),
        )
        return bool(rows)

    def entries_for_date(self, digest_date: str) -> list[tuple]:
        return self.query("digest_date = ?", (digest_date,))
