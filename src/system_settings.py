"""
System Settings

Manages runtime configuration for the digest pipeline with database persistence.
Provides key-value storage with type conversion and caching.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
from typing import Any, Optional

import constants as const
from basetableprocessor import BaseTableProcessor
from db import Db


logger = logging.getLogger(__name__)

# key -> (default, category, description)
DIGEST_SETTINGS: dict[str, tuple[Any, str, str]] = {
    const.SETTING_DIGEST_MODEL: (const.DEFAULT_DIGEST_MODEL, "llm", "LiteLLM model used to summarize digests"),
    const.SETTING_OLLAMA_BASE_URL: (const.OLLAMA_BASE_URL, "llm", "Ollama server for ollama/* models"),
    const.SETTING_DIGEST_SEND_TIME: (const.DEFAULT_DIGEST_SEND_TIME, "digest", "Daily send time, HH:MM UTC"),
    const.SETTING_DIGEST_CONCURRENCY: (const.DEFAULT_DIGEST_CONCURRENCY, "digest", "Recipients resolving news at once"),
    const.SETTING_DIGEST_RECIPIENT_TIMEOUT: (const.DEFAULT_DIGEST_RECIPIENT_TIMEOUT, "digest", "Seconds allowed per recipient per step"),
    const.SETTING_DIGEST_LEDGER_ENABLED: (const.DEFAULT_DIGEST_LEDGER_ENABLED, "digest", "Skip recipients already sent today"),
}


class SystemSettings(BaseTableProcessor):
    """
    System-wide configuration settings with database persistence.

    Uses singleton pattern to ensure single instance with shared cache.
    """

    _instance: Optional["SystemSettings"] = None
    _initialized: bool = False

    def __new__(cls, db: Db | None = None):
        """Singleton pattern - only create one instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, db: Db | None = None):
        """Initialize only once, even if called multiple times."""
        if self._initialized:
            return

        if db is None:
            db = Db(in_memory=False)

        super().__init__(db, "system_settings")

        self._cache: dict[str, Any] = {}
        self._initialized = True
        logger.info("SystemSettings singleton initialized")

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next call binds to a new database (tests, CLI --in-memory)."""
        cls._instance = None
        cls._initialized = False

    def create_table(self) -> None:
        """Create system_settings table if it doesn't exist."""
        query = """
        CREATE TABLE IF NOT EXISTS system_settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            value_type TEXT NOT NULL,
            category TEXT,
            description TEXT,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_by TEXT
        )
        """
        self.db.create_table(query)

    @classmethod
    def headers(cls) -> tuple:
        return ("Key", "Value", "Type", "Category", "Description", "Updated At", "Updated By")

    def select_fields(self) -> str:
        return "key, value, value_type, category, description, updated_at, updated_by"

    def default_order(self) -> str:
        return "category, key"

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value with type conversion and caching.

        Args:
            key: Setting key (e.g., 'digest.recipient_concurrency')
            default: Default value if key not found

        Returns:
            Setting value converted to appropriate Python type (int, bool, float, dict, str)
        """
        if key in self._cache:
            return self._cache[key]

        rows = self.db.query_parameterized(
            "SELECT value, value_type FROM system_settings WHERE key = ?", (key,)
        )
        if not rows:
            return default

        value, value_type = rows[0]
        converted = self._convert_value(value, value_type)
        self._cache[key] = converted
        return converted

    def set(self, key: str, value: Any, username: str = "system",
            category: str | None = None, description: str | None = None) -> None:
        """
        Set setting value with automatic type detection.

        Args:
            key: Setting key
            value: Setting value (will be type-detected and serialized)
            username: User making the change (default: 'system')
            category: Optional category (e.g., 'llm', 'digest')
            description: Optional human-readable description
        """
        value_type = self._detect_type(value)
        str_value = self._serialize_value(value, value_type)

        self.db.execute("""
            INSERT OR REPLACE INTO system_settings
            (key, value, value_type, category, description, updated_at, updated_by)
            VALUES (?, ?, ?, ?, ?, datetime('now'), ?)
        """, (key, str_value, value_type, category, description, username))

        self._cache.pop(key, None)
        logger.info(f"Setting updated: {key} = {value} (by {username})")

    def delete_key(self, key: str) -> bool:
        cur = self.db.execute("DELETE FROM system_settings WHERE key = ?", (key,))
        deleted = cur.rowcount > 0
        if deleted:
            self._cache.pop(key, None)
            logger.info(f"Setting deleted: {key}")
        return deleted

    def get_by_category(self, category: str) -> dict:
        """
        Get all settings in a category as dict.

        Args:
            category: Category name (e.g., 'llm', 'digest')

        Returns:
            Dict mapping keys to values (with type conversion)
        """
        rows = self.db.query_parameterized("""
            SELECT key, value, value_type FROM system_settings
            WHERE category = ?
            ORDER BY key
        """, (category,))
        return {row[0]: self._convert_value(row[1], row[2]) for row in rows}

    def effective(self, key: str) -> Any:
        """Stored value for a digest setting, or its registered default."""
        if key not in DIGEST_SETTINGS:
            raise KeyError(f"Unknown digest setting: {key}")
        return self.get(key, DIGEST_SETTINGS[key][0])

    def effective_all(self) -> list[tuple[str, Any, bool, str]]:
        """(key, value, is_default, description) for every registered digest setting."""
        rows = []
        for key, (default, _category, description) in DIGEST_SETTINGS.items():
            stored = self.get(key)
            rows.append((key, default if stored is None else stored, stored is None, description))
        return rows

    def set_digest_setting(self, key: str, value: Any, username: str = "system") -> None:
        """set() for a registered key, filling category and description from the registry."""
        if key not in DIGEST_SETTINGS:
            raise KeyError(f"Unknown digest setting: {key}")
        _default, category, description = DIGEST_SETTINGS[key]
        self.set(key, value, username=username, category=category, description=description)

    # Type conversion helpers
    def _convert_value(self, value: str, value_type: str) -> Any:
        """Convert string value from database to appropriate Python type."""
        if value_type == "int":
            return int(value)
        if value_type == "float":
            return float(value)
        if value_type == "bool":
            return value.lower() in ("true", "1", "yes")
        if value_type == "json":
            return json.loads(value)
        return value

    def _detect_type(self, value: Any) -> str:
        """Detect Python type for database storage."""
        if isinstance(value, bool):
            return "bool"
        if isinstance(value, int):
            return "int"
        if isinstance(value, float):
            return "float"
        if isinstance(value, (dict, list)):
            return "json"
        return "string"

    def _serialize_value(self, value: Any, value_type: str) -> str:
        if value_type == "json":
            return json.dumps(value)
        return str(value)


def get_settings(db: Db | None = None) -> SystemSettings:
    """
    Get the SystemSettings singleton instance.

    Args:
        db: Optional Db instance (only used on first call)

    Returns:
        SystemSettings singleton instance
    """
    return SystemSettings(db)


def parse_setting_value(raw: str) -> Any:
    """Best-effort conversion of a CLI string into bool/int/float/json/str."""
    lowered = raw.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            pass
    if raw.strip().startswith(("{", "[")):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass
    return raw
