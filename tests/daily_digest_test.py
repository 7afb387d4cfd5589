"""
Unit tests for DailyDigest.

News, LLM and SMTP are mocked; users, watchlists, settings and the
delivery ledger run against an in-memory database.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import sqlite3
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import constants as const
from daily_digest import DailyDigest, run_daily_digest
from db import Db
from delivery_ledger import DeliveryLedger
from news_models import FormattedNewsItem
from system_settings import SystemSettings, get_settings
from users import Users
from watchlists import Watchlists


NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_article(symbol="AAPL", n=1):
    return FormattedNewsItem(
        id=n,
        headline=f"{symbol} headline {n}",
        summary="Something happened...",
        source="Reuters",
        url=f"https://news.example.com/{symbol}/{n}",
        datetime=1_760_000_000 + n,
        image="",
        category="company",
        related=symbol,
    )


class DigestTestBase:
    """Shared fixtures: three users with watchlists and mocked collaborators"""

    def setup_method(self):
        SystemSettings.reset()
        self.db = Db(in_memory=True)
        self.users = Users(self.db)
        self.watchlists = Watchlists(self.db)

        for email, name, symbols in [
            ("ann@example.com", "Ann", ["AAPL"]),
            ("bob@example.com", "Bob", ["MSFT"]),
            ("cat@example.com", "Cat", ["TSLA"]),
        ]:
            user_id = self.users.add(email, name)
            for symbol in symbols:
                self.watchlists.add(user_id, symbol)

        self.aggregator = Mock()
        self.aggregator.fetch_digest_news = AsyncMock(
            side_effect=lambda symbols: [make_article(s) for s in symbols]
        )
        self.summarizer = Mock()
        self.summarizer.summarize = AsyncMock(return_value="<p>summary</p>")
        self.email_sender = Mock()
        self.email_sender.send_digest_email = AsyncMock(return_value=None)

    def teardown_method(self):
        SystemSettings.reset()

    def make_digest(self, **kwargs):
        return DailyDigest(
            self.db,
            aggregator=self.aggregator,
            summarizer=self.summarizer,
            email_sender=self.email_sender,
            **kwargs,
        )

    def sent_to(self):
        return [c.args[0] for c in self.email_sender.send_digest_email.call_args_list]


class TestDailyDigestRun(DigestTestBase):
    """Test the full run"""

    def test_all_recipients_sent(self):
        result = self.make_digest().run(NOW)

        assert result.success is True
        assert result.count("sent") == 3
        assert sorted(self.sent_to()) == ["ann@example.com", "bob@example.com", "cat@example.com"]
        assert "Daily news summary emails sent successfully" in result.message

    def test_email_arguments(self):
        self.make_digest().run(NOW)

        email, date_label, content = self.email_sender.send_digest_email.call_args_list[0].args
        assert date_label == "Sunday, October 18, 2026"
        assert content == "<p>summary</p>"

    def test_prompt_carries_recipient_articles(self):
        self.make_digest().run(NOW)

        prompts = [c.args[0] for c in self.summarizer.summarize.call_args_list]
        assert len(prompts) == 3
        assert "AAPL headline 1" in prompts[0]
        assert "MSFT headline 1" in prompts[1]

    def test_summarization_failure_isolated(self):
        self.summarizer.summarize = AsyncMock(side_effect=["<p>a</p>", RuntimeError("llm down"), "<p>c</p>"])

        result = self.make_digest().run(NOW)

        assert result.success is True
        assert sorted(self.sent_to()) == ["ann@example.com", "cat@example.com"]
        outcomes = {o.email: o for o in result.outcomes}
        assert outcomes["bob@example.com"].status == "skipped"
        assert outcomes["bob@example.com"].reason == "no summary"

    def test_delivery_failure_recorded(self):
        async def send(email, date_label, content):
            if email == "bob@example.com":
                raise ConnectionRefusedError("smtp refused")

        self.email_sender.send_digest_email = AsyncMock(side_effect=send)

        result = self.make_digest().run(NOW)

        assert result.success is True
        assert result.count("sent") == 2
        assert result.count("failed") == 1
        ledger = DeliveryLedger(self.db)
        statuses = {row[0]: row[2] for row in ledger.entries_for_date("2026-10-18")}
        assert statuses["bob@example.com"] == "failed"
        assert statuses["ann@example.com"] == "sent"

    def test_no_recipients(self):
        for email in ("ann@example.com", "bob@example.com", "cat@example.com"):
            self.users.remove(email)

        result = self.make_digest().run(NOW)

        assert result.success is False
        assert result.message == "No users found for news email"
        self.aggregator.fetch_digest_news.assert_not_called()
        self.email_sender.send_digest_email.assert_not_called()

    def test_users_without_name_are_skipped(self):
        self.users.add("noname@example.com", "")

        self.make_digest().run(NOW)

        assert "noname@example.com" not in self.sent_to()

    def test_recipient_lookup_failure_means_no_recipients(self):
        digest = self.make_digest()
        digest.users = Mock()
        digest.users.list_digest_recipients.side_effect = RuntimeError("db locked")

        result = digest.run(NOW)

        assert result.success is False

    def test_as_dict(self):
        summary = self.make_digest().run(NOW).as_dict()

        assert summary["success"] is True
        assert summary["sent"] == 3
        assert summary["skipped"] == 0
        assert summary["failed"] == 0
        assert len(summary["outcomes"]) == 3


class TestNewsResolution(DigestTestBase):
    """Test per-recipient news resolution"""

    def test_empty_watchlist_news_falls_back_to_general(self):
        general = [make_article("", 9)]

        async def fetch(symbols):
            return [] if symbols else general

        self.aggregator.fetch_digest_news = AsyncMock(side_effect=fetch)
        digest = self.make_digest()
        recipients = digest.resolve_recipients()

        results = asyncio.run(digest.resolve_news(recipients[:1]))

        assert results[0].articles == general
        assert self.aggregator.fetch_digest_news.call_args_list[-1].args == ([],)

    def test_unknown_watchlist_uses_empty_symbols(self):
        self.users.add("new@example.com", "New")
        digest = self.make_digest()
        recipient = [r for r in digest.resolve_recipients() if r.email == "new@example.com"][0]

        asyncio.run(digest.resolve_news([recipient]))

        assert self.aggregator.fetch_digest_news.call_args_list[0].args == ([],)

    def test_watchlist_failure_uses_general_feed(self):
        digest = self.make_digest()
        digest.watchlists = Mock()
        digest.watchlists.list_symbols_by_email.side_effect = RuntimeError("db locked")
        self.aggregator.fetch_digest_news = AsyncMock(return_value=[make_article("", 3)])

        results = asyncio.run(digest.resolve_news(digest.resolve_recipients()))

        assert all(len(r.articles) == 1 for r in results)
        assert self.aggregator.fetch_digest_news.call_args_list[0].args == ([],)

    def test_articles_capped_at_six(self):
        self.aggregator.fetch_digest_news = AsyncMock(return_value=[make_article("AAPL", n) for n in range(10)])
        digest = self.make_digest()

        results = asyncio.run(digest.resolve_news(digest.resolve_recipients()))

        assert all(len(r.articles) == 6 for r in results)

    def test_fetch_error_gives_empty_articles(self):
        async def fetch(symbols):
            if symbols == ["MSFT"]:
                raise ValueError("Finnhub API key not configured")
            return [make_article(s) for s in symbols]

        self.aggregator.fetch_digest_news = AsyncMock(side_effect=fetch)
        digest = self.make_digest()

        results = asyncio.run(digest.resolve_news(digest.resolve_recipients()))

        by_email = {r.recipient.email: r for r in results}
        assert len(results) == 3
        assert by_email["bob@example.com"].articles == []
        assert len(by_email["ann@example.com"].articles) == 1

    def test_slow_recipient_times_out(self):
        async def fetch(symbols):
            if symbols == ["TSLA"]:
                await asyncio.sleep(5)
            return [make_article(s) for s in symbols]

        self.aggregator.fetch_digest_news = AsyncMock(side_effect=fetch)
        digest = self.make_digest(recipient_timeout=0.05)

        result = digest.run(NOW)

        # Timed out recipient still gets a (general) summary attempt with no articles
        assert result.count("sent") == 3

    def test_fetch_error_still_summarized_and_sent(self):
        self.aggregator.fetch_digest_news = AsyncMock(side_effect=RuntimeError("network"))

        result = self.make_digest().run(NOW)

        assert result.count("sent") == 3
        assert self.summarizer.summarize.await_count == 3


class TestLedger(DigestTestBase):
    """Test same-day re-run suppression"""

    def test_rerun_same_day_sends_nothing(self):
        digest = self.make_digest()
        digest.run(NOW)
        second = digest.run(NOW)

        assert self.email_sender.send_digest_email.await_count == 3
        assert second.count("skipped") == 3
        assert all(o.reason == "already sent today" for o in second.outcomes)

    def test_failed_delivery_is_retried(self):
        self.email_sender.send_digest_email = AsyncMock(side_effect=[OSError("down"), None, None])
        digest = self.make_digest()
        digest.run(NOW)

        self.email_sender.send_digest_email = AsyncMock(return_value=None)
        second = digest.run(NOW)

        assert second.count("sent") == 1

    def test_next_day_sends_again(self):
        digest = self.make_digest()
        digest.run(NOW)
        result = digest.run(datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc))

        assert result.count("sent") == 3

    def test_ledger_write_error_keeps_run_result(self):
        digest = self.make_digest()
        record = digest.ledger.record

        def flaky_record(digest_date, outcome):
            if outcome.email == "bob@example.com":
                raise sqlite3.OperationalError("database is locked")
            record(digest_date, outcome)

        digest.ledger.record = Mock(side_effect=flaky_record)

        result = digest.run(NOW)

        assert result.success is True
        assert result.count("sent") == 3
        statuses = {row[0]: row[2] for row in digest.ledger.entries_for_date("2026-10-18")}
        assert statuses == {"ann@example.com": "sent", "cat@example.com": "sent"}

    def test_ledger_check_error_fails_only_that_recipient(self):
        digest = self.make_digest()
        has_sent = digest.ledger.has_sent

        def flaky_has_sent(email, digest_date):
            if email == "cat@example.com":
                raise sqlite3.OperationalError("database is locked")
            return has_sent(email, digest_date)

        digest.ledger.has_sent = Mock(side_effect=flaky_has_sent)

        result = digest.run(NOW)

        by_email = {o.email: o for o in result.outcomes}
        assert by_email["cat@example.com"].status == "failed"
        assert "ledger check failed" in by_email["cat@example.com"].reason
        assert sorted(self.sent_to()) == ["ann@example.com", "bob@example.com"]

    def test_slow_send_is_not_cut_short(self):
        async def slow_send(email, date_label, content):
            await asyncio.sleep(0.1)

        self.email_sender.send_digest_email = AsyncMock(side_effect=slow_send)
        digest = self.make_digest(recipient_timeout=0.01)
        results = asyncio.run(digest.resolve_news(digest.resolve_recipients()))
        for r in results:
            r.summary_text = "<p>summary</p>"

        outcomes = asyncio.run(digest.deliver(results, "2026-10-18", "Sunday, October 18, 2026"))

        assert [o.status for o in outcomes] == ["sent", "sent", "sent"]

    def test_ledger_disabled(self):
        digest = self.make_digest(ledger_enabled=False)
        digest.run(NOW)
        digest.run(NOW)

        assert self.email_sender.send_digest_email.await_count == 6
        assert DeliveryLedger(self.db).count() == 0


class TestSettings(DigestTestBase):
    """Test settings-driven defaults"""

    def test_defaults(self):
        digest = self.make_digest()
        assert digest.concurrency == const.DEFAULT_DIGEST_CONCURRENCY
        assert digest.recipient_timeout == const.DEFAULT_DIGEST_RECIPIENT_TIMEOUT
        assert digest.ledger_enabled is True

    def test_values_from_settings(self):
        settings = get_settings(self.db)
        settings.set(const.SETTING_DIGEST_CONCURRENCY, 2)
        settings.set(const.SETTING_DIGEST_RECIPIENT_TIMEOUT, 15)
        settings.set(const.SETTING_DIGEST_LEDGER_ENABLED, False)

        digest = self.make_digest()

        assert digest.concurrency == 2
        assert digest.recipient_timeout == 15.0
        assert digest.ledger_enabled is False

    def test_explicit_arguments_win(self):
        get_settings(self.db).set(const.SETTING_DIGEST_CONCURRENCY, 2)
        assert self.make_digest(concurrency=8).concurrency == 8


class TestRunEntryPoint:
    """Test the shared trigger entry point"""

    def setup_method(self):
        SystemSettings.reset()
        self.db = Db(in_memory=True)

    def teardown_method(self):
        SystemSettings.reset()

    def test_no_users_returns_failure_dict(self):
        result = run_daily_digest(self.db)

        assert result["success"] is False
        assert result["message"] == "No users found for news email"
        assert result["outcomes"] == []
