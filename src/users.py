#!/usr/bin/env python3
"""
User directory

Stores the user records the digest run needs (id, email, name) and
resolves the list of digest recipients.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import uuid

# Local application imports
from basetableprocessor import BaseTableProcessor
from db import Db
from news_models import Recipient


# Get a logger instance
logger = logging.getLogger(__name__)

class Users(BaseTableProcessor):

    def __init__(self, db: Db) -> None:
        super().__init__(db, "users")

    def create_table(self) -> None:
        query = """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT UNIQUE,
            name TEXT,
            country TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
        """
        self.db.create_table(query)

    @classmethod
    def headers(cls) -> tuple:
        return ("ID", "Email", "Name", "Country")

    def select_fields(self) -> str:
        return "id, email, name, country"

    def default_order(self) -> str:
        return "email ASC"

    def add(self, email: str | None, name: str | None, country: str | None = None, user_id: str | None = None) -> str:
        """
        Add a user.

        Args:
            email: Email address (normalized to lowercase)
            name: Display name
            country: Optional country
            user_id: Optional explicit id (generated if omitted)

        Returns:
            The user's id
        """
        user_id = user_id or uuid.uuid4().hex
        email = email.strip().lower() if email else None
        query = """
            INSERT INTO users
                (id, email, name, country)
                values(?, ?, ?, ?)
            """
        self.db.insert(query, (user_id, email, name, country))
        logger.info(f"Added user {email} ({user_id})")
        return user_id

    def remove(self, email: str) -> int:
        cur = self.db.execute("DELETE FROM users WHERE email = ?", (email.strip().lower(),))
        logger.info(f"Removed {cur.rowcount} user(s) with email {email}")
        return cur.rowcount

    def get_id_by_email(self, email: str) -> str | None:
        if not email:
            return None
        rows = self.db.query_parameterized(
            "SELECT id FROM users WHERE email = ?", (email.strip().lower(),)
        )
        return rows[0][0] if rows else None

    def list_digest_recipients(self) -> list[Recipient]:
        """
        Users eligible for the daily digest: both email and name present.

        Returns:
            List of Recipient, ordered by email
        """
        rows = self.query("email IS NOT NULL AND email != '' AND name IS NOT NULL AND name != ''")
        recipients = [Recipient(id=str(row[0]), email=row[1], name=row[2]) for row in rows]
        logger.debug(f"Resolved {len(recipients)} digest recipients")
        return recipients
