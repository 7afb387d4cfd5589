"""
Daily Digest Runner

Sends every eligible user a personalized market news email:

1. Resolve recipients (users with both an email and a name)
2. Resolve news per recipient from their watchlist (general feed fallback)
3. Summarize each recipient's articles with the LLM
4. Deliver the summaries by email

Each step is isolated per recipient: one recipient failing never stops
the others. Summarization failure means nothing is sent to that
recipient. A delivery ledger keeps same-day re-runs from emailing anyone
twice.

Invoked by the daily scheduler and by the manual CLI trigger; both run
the same code path.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
from datetime import datetime

import constants as const
import util
from db import Db
from delivery_ledger import DeliveryLedger
from email_sender import EmailSender
from news_aggregator import NewsAggregator
from news_models import (
    STATUS_FAILED,
    STATUS_SENT,
    STATUS_SKIPPED,
    DeliveryOutcome,
    DigestResult,
    DigestRunResult,
    FormattedNewsItem,
    Recipient,
)
from summarizer import NewsSummarizer, build_summary_prompt
from system_settings import get_settings
from users import Users
from watchlists import Watchlists


logger = logging.getLogger(__name__)


class DailyDigest:
    """Run the daily news digest for all recipients."""

    def __init__(
        self,
        db: Db,
        aggregator: NewsAggregator | None = None,
        summarizer: NewsSummarizer | None = None,
        email_sender: EmailSender | None = None,
        concurrency: int | None = None,
        recipient_timeout: float | None = None,
        ledger_enabled: bool | None = None,
    ):
        """
        Initialize the digest runner.

        Args:
            db: Database instance (users, watchlists, ledger, settings)
            aggregator: News aggregator (default: Finnhub-backed)
            summarizer: LLM summarizer (default: configured digest model)
            email_sender: SMTP sender (default: environment SMTP settings)
            concurrency: Max recipients resolving news at once (default from settings)
            recipient_timeout: Seconds allowed per recipient for news and summary (default from settings);
                delivery is bounded by the SMTP socket timeout instead
            ledger_enabled: Skip recipients already sent today (default from settings)
        """
        self.db = db
        self.users = Users(db)
        self.watchlists = Watchlists(db)
        self.ledger = DeliveryLedger(db)
        self.aggregator = aggregator or NewsAggregator()
        self.summarizer = summarizer or NewsSummarizer()
        self.email_sender = email_sender or EmailSender()

        settings = get_settings(db)
        if concurrency is None:
            concurrency = settings.effective(const.SETTING_DIGEST_CONCURRENCY)
        if recipient_timeout is None:
            recipient_timeout = settings.effective(const.SETTING_DIGEST_RECIPIENT_TIMEOUT)
        if ledger_enabled is None:
            ledger_enabled = settings.effective(const.SETTING_DIGEST_LEDGER_ENABLED)

        self.concurrency = max(1, int(concurrency))
        self.recipient_timeout = float(recipient_timeout)
        self.ledger_enabled = bool(ledger_enabled)

    # ===== Step 1: recipients =====

    def resolve_recipients(self) -> list[Recipient]:
        try:
            return self.users.list_digest_recipients()
        except Exception as e:
            logger.error(f"Error fetching users for news email: {e}", exc_info=True)
            return []

    # ===== Step 2: news per recipient =====

    def _recipient_symbols(self, email: str) -> list[str]:
        try:
            return self.watchlists.list_symbols_by_email(email)
        except Exception as e:
            logger.error(f"Error fetching watchlist symbols for {email}: {e}")
            return []

    async def _prepare_recipient_news(self, recipient: Recipient) -> list[FormattedNewsItem]:
        symbols = self._recipient_symbols(recipient.email)
        articles = (await self.aggregator.fetch_digest_news(symbols))[: const.MAX_DIGEST_ARTICLES]
        if not articles:
            articles = (await self.aggregator.fetch_digest_news([]))[: const.MAX_DIGEST_ARTICLES]
        return articles

    async def _resolve_one(self, recipient: Recipient, semaphore: asyncio.Semaphore) -> DigestResult:
        async with semaphore:
            try:
                articles = await asyncio.wait_for(
                    self._prepare_recipient_news(recipient), timeout=self.recipient_timeout
                )
            except Exception as e:
                logger.error(f"Error preparing news for {recipient.email}: {e!r}")
                articles = []
        logger.debug(f"{recipient.email}: {len(articles)} articles")
        return DigestResult(recipient=recipient, articles=articles)

    async def resolve_news(self, recipients: list[Recipient]) -> list[DigestResult]:
        """Articles for every recipient; a failing recipient gets an empty list, never dropped."""
        semaphore = asyncio.Semaphore(self.concurrency)
        return list(await asyncio.gather(*(self._resolve_one(r, semaphore) for r in recipients)))

    # ===== Step 3: summaries =====

    async def summarize(self, results: list[DigestResult]) -> None:
        """Fill summary_text per recipient; None marks a failed summarization."""
        for result in results:
            try:
                prompt = build_summary_prompt(result.articles)
                result.summary_text = await asyncio.wait_for(
                    self.summarizer.summarize(prompt), timeout=self.recipient_timeout
                )
            except Exception as e:
                logger.error(f"Failed to summarize news for {result.recipient.email}: {e!r}")
                result.summary_text = None

    # ===== Step 4: delivery =====

    async def _deliver_one(self, result: DigestResult, digest_date: str, date_label: str) -> DeliveryOutcome:
        email = result.recipient.email

        if result.summary_text is None:
            return DeliveryOutcome(email, STATUS_SKIPPED, "no summary")

        if self.ledger_enabled:
            try:
                if self.ledger.has_sent(email, digest_date):
                    logger.info(f"Digest already sent to {email} for {digest_date}, skipping")
                    return DeliveryOutcome(email, STATUS_SKIPPED, "already sent today")
            except Exception as e:
                logger.error(f"Delivery ledger check failed for {email}: {e!r}")
                return DeliveryOutcome(email, STATUS_FAILED, f"ledger check failed: {e}")

        # Bounded by the SMTP socket timeout only
        try:
            await self.email_sender.send_digest_email(email, date_label, result.summary_text)
            outcome = DeliveryOutcome(email, STATUS_SENT)
        except Exception as e:
            logger.error(f"Failed to send news email to {email}: {e!r}")
            outcome = DeliveryOutcome(email, STATUS_FAILED, str(e) or type(e).__name__)

        if self.ledger_enabled:
            try:
                self.ledger.record(digest_date, outcome)
            except Exception as e:
                logger.error(f"Failed to record {outcome.status} delivery for {email}: {e!r}")
        return outcome

    async def deliver(self, results: list[DigestResult], digest_date: str, date_label: str) -> list[DeliveryOutcome]:
        return list(await asyncio.gather(*(self._deliver_one(r, digest_date, date_label) for r in results)))

    # ===== Entry point =====

    async def run_daily_digest(self, now: datetime | None = None) -> DigestRunResult:
        """
        Run the full pipeline once.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            DigestRunResult; success is False only when there was nobody to send to
        """
        now = now or util.utc_now()
        digest_date = util.get_today_string(now)
        date_label = util.get_formatted_today_date(now)

        recipients = self.resolve_recipients()
        if not recipients:
            logger.info("No users found for news email")
            return DigestRunResult(success=False, message="No users found for news email")

        logger.info(f"Running daily digest for {len(recipients)} recipients ({digest_date})")

        results = await self.resolve_news(recipients)
        await self.summarize(results)
        outcomes = await self.deliver(results, digest_date, date_label)

        run_result = DigestRunResult(success=True, message="", outcomes=outcomes)
        run_result.message = (
            "Daily news summary emails sent successfully "
            f"({run_result.count(STATUS_SENT)} sent, "
            f"{run_result.count(STATUS_SKIPPED)} skipped, "
            f"{run_result.count(STATUS_FAILED)} failed)"
        )
        logger.info(run_result.message)
        return run_result

    def run(self, now: datetime | None = None) -> DigestRunResult:
        """Blocking entry point for the scheduler and CLI."""
        return asyncio.run(self.run_daily_digest(now))


def run_daily_digest(db: Db | None = None) -> dict:
    """
    Trigger entry point shared by the scheduler and the manual CLI command.

    Returns:
        {'success': bool, 'message': str, 'sent': int, 'skipped': int, 'failed': int, 'outcomes': [...]}
    """
    db = db or Db()
    return DailyDigest(db).run().as_dict()


def main():
    """Run the digest once against the configured database."""
    util.setup_logger(name=None, level="INFO", console=True)
    result = run_daily_digest()
    print(result["message"])


if __name__ == "__main__":
    main()
