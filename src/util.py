#!/usr/bin/env python3
"""
Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

# Standard library imports
import logging
import os
from datetime import datetime, timedelta, timezone
from logging.handlers import RotatingFileHandler

# Local application imports
import constants as const


# Module-level logger
logger = logging.getLogger(__name__)


def setup_logger(name: str | None = None, level: str | None = None, console: bool = True, log_file: str | None = None) -> logging.Logger:
    """
    Setup a logger with file and optional console output.

    Args:
        name: Logger name (use __name__ from calling module). If None, configures root logger.
        level: Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO or env LOG_LEVEL.
        console: Whether to also log to console (default True for main apps)
        log_file: Custom log filename (defaults to const.LOG_FILE)

    Returns:
        logging.Logger: Configured logger instance

    Example:
        # For application entry point (cli.py, scheduler.py):
        util.setup_logger(name=None, level='INFO', console=True)
        logger = logging.getLogger(__name__)

        # For library modules:
        logger = util.get_logger(__name__)
    """
    # Determine log level from parameter, environment, or default to INFO
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, level, logging.INFO)

    logger = logging.getLogger(name) if name else logging.getLogger()

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    logger.setLevel(numeric_level)

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        datefmt="%H:%M:%S"
    )

    log_filename = log_file if log_file else const.LOG_FILE

    # File handler with rotation (don't delete on startup)
    file_handler = RotatingFileHandler(
        filename=log_filename,
        maxBytes=const.MAX_LOG_SIZE,
        backupCount=const.BACKUP_COUNT,
        encoding="utf-8"
    )
    file_handler.setFormatter(detailed_formatter)
    file_handler.setLevel(logging.DEBUG)  # Capture everything to file
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(console_formatter)
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module-specific logger.

    Args:
        name: Use __name__ from the calling module

    Returns:
        logging.Logger: Logger instance for the module
    """
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """
    Dynamically change log level for all loggers.

    Args:
        level: Log level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Update console handlers to new level (keep file at DEBUG)
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(numeric_level)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_date_range(days: int, now: datetime | None = None) -> tuple[str, str]:
    """
    Trailing window of calendar days ending today, as UTC YYYY-MM-DD strings.

    Args:
        days: Number of days to look back
        now: Reference time (defaults to current UTC time)

    Returns:
        (from_date, to_date)
    """
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    to_date = now.strftime(const.ISO_DATE_FMT)
    from_date = (now - timedelta(days=days)).strftime(const.ISO_DATE_FMT)
    return from_date, to_date


def get_today_string(now: datetime | None = None) -> str:
    return get_date_range(0, now)[1]


def get_formatted_today_date(now: datetime | None = None) -> str:
    """Human readable UTC date, e.g. 'Sunday, October 18, 2026'."""
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.strftime('%A')}, {now.strftime('%B')} {now.day}, {now.year}"
