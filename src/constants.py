#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import os

# Database
# Use absolute path so the CLI, scheduler and tests agree on the same database
import pathlib

from dotenv import load_dotenv


PROJECT_ROOT = pathlib.Path(__file__).parent.parent.absolute()

load_dotenv()

DATABASE_PATH = os.getenv("SIGNALIST_DB_PATH", str(PROJECT_ROOT / "signalist.db"))

# Logging
LOG_FILE = "digest.log"
CMDS_LOG_FILE = "cmds.log"
SCHEDULER_LOG_FILE = "scheduler.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

# App Version
VERSION = 0.3
APP_NAME = "Signalist"

# FINNHUB
# Server-side key preferred, public key accepted as a fallback
FINNHUB_API_KEY = os.getenv("FINNHUB_API_KEY") or os.getenv("NEXT_PUBLIC_FINNHUB_API_KEY")
FINNHUB_BASE_URL = "https://finnhub.io/api/v1"
FINNHUB_TIMEOUT_SECONDS = 10

# LLM API Keys (stored in .env)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
OLLAMA_BASE_URL = "http://localhost:11434"

# EMAIL
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_STARTTLS = os.getenv("SMTP_STARTTLS", "true").lower() in ("true", "1", "yes")
SMTP_TIMEOUT_SECONDS = 60
EMAIL_FROM = os.getenv("EMAIL_FROM", '"Signalist News" <signalist@jsupport.pro>')

# SYSTEM SETTING KEYS (database-backed configuration)
# Use with SystemSettings: settings.get(const.SETTING_DIGEST_MODEL, const.DEFAULT_DIGEST_MODEL)
SETTING_DIGEST_MODEL = "llm.digest_model"
SETTING_OLLAMA_BASE_URL = "llm.ollama_base_url"
SETTING_DIGEST_SEND_TIME = "digest.send_time_utc"
SETTING_DIGEST_CONCURRENCY = "digest.recipient_concurrency"
SETTING_DIGEST_RECIPIENT_TIMEOUT = "digest.recipient_timeout_seconds"
SETTING_DIGEST_LEDGER_ENABLED = "digest.ledger_enabled"

# Setting defaults
DEFAULT_DIGEST_MODEL = "gemini/gemini-2.5-flash-lite"
DEFAULT_DIGEST_SEND_TIME = "12:00"  # daily at noon UTC
DEFAULT_DIGEST_CONCURRENCY = 4
DEFAULT_DIGEST_RECIPIENT_TIMEOUT = 60.0
DEFAULT_DIGEST_LEDGER_ENABLED = True

# News aggregation
MAX_DIGEST_ARTICLES = 6
GENERAL_NEWS_DEDUP_CAP = 20
COMPANY_NEWS_LOOKBACK_DAYS = 5
COMPANY_SUMMARY_MAX_CHARS = 200
GENERAL_SUMMARY_MAX_CHARS = 150
SUMMARY_ELLIPSIS = "..."
GENERAL_NEWS_CATEGORY = "general"

# Date format
ISO_DATE_FMT = "%Y-%m-%d"
