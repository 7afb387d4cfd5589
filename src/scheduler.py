#!/usr/bin/env python3
"""
Digest Scheduler

Runs the daily news digest at a fixed UTC time every day.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.

Usage:
    python src/scheduler.py
"""

import logging
import re
import threading
from collections.abc import Callable

import schedule

import constants as const
import util
from daily_digest import run_daily_digest
from db import Db
from system_settings import get_settings


logger = logging.getLogger(__name__)

SEND_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class DigestScheduler:
    """Daily trigger for the digest run"""

    def __init__(
        self,
        db: Db,
        send_time: str | None = None,
        job: Callable[[Db], dict] = run_daily_digest,
        poll_seconds: int = 30,
    ):
        """
        Args:
            db: Database instance passed to each run
            send_time: 'HH:MM' in UTC (default from settings, 12:00)
            job: Digest entry point (same one the manual trigger uses)
            poll_seconds: How often pending jobs are checked
        """
        self.db = db
        if send_time is None:
            send_time = get_settings(db).effective(const.SETTING_DIGEST_SEND_TIME)
        if not SEND_TIME_PATTERN.match(str(send_time)):
            raise ValueError(f"Invalid digest send time '{send_time}', expected HH:MM (UTC)")
        self.send_time = str(send_time)
        self.job = job
        self.poll_seconds = poll_seconds
        self.scheduler = schedule.Scheduler()
        self.stop_event = threading.Event()

    def run_job(self) -> dict | None:
        """Run one digest; errors are logged so the next day's run still happens."""
        logger.info("Running scheduled daily digest")
        try:
            result = self.job(self.db)
            logger.info(f"Scheduled daily digest finished: {result.get('message')}")
            return result
        except Exception as e:
            logger.error(f"Scheduled daily digest failed: {e}", exc_info=True)
            return None

    def register(self) -> schedule.Job:
        self.scheduler.clear()
        job = self.scheduler.every().day.at(self.send_time, "UTC").do(self.run_job)
        logger.info(f"Daily digest scheduled at {self.send_time} UTC, next run {self.scheduler.next_run}")
        return job

    def run_forever(self) -> None:
        self.register()
        while not self.stop_event.is_set():
            self.scheduler.run_pending()
            self.stop_event.wait(self.poll_seconds)
        logger.info("Digest scheduler stopped")

    def stop(self) -> None:
        self.stop_event.set()


def main() -> None:
    util.setup_logger(name=None, level=None, console=True, log_file=const.SCHEDULER_LOG_FILE)
    db = Db()
    digest_scheduler = DigestScheduler(db)
    try:
        digest_scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
        digest_scheduler.stop()


if __name__ == "__main__":
    main()
