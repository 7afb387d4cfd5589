"""
Unit tests for EmailSender.

smtplib.SMTP is mocked; no mail leaves the machine.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import pytest
import smtplib
from unittest.mock import MagicMock, patch
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from email_sender import EmailSender, render_news_summary_email


class TestRenderTemplate:
    """Test digest template rendering"""

    def test_placeholders_replaced(self):
        html = render_news_summary_email("Sunday, October 18, 2026", "<p>Stocks up</p>")
        assert "Sunday, October 18, 2026" in html
        assert "<p>Stocks up</p>" in html
        assert "{{date}}" not in html
        assert "{{newsContent}}" not in html


class TestEmailSender:
    """Test SMTP delivery"""

    def setup_method(self):
        self.sender = EmailSender(
            host="smtp.example.com",
            port=587,
            username="user",
            password="secret",
            starttls=True,
            sender="Signalist <news@example.com>",
            timeout=5,
        )

    def smtp_mock(self, mock_smtp):
        server = MagicMock()
        mock_smtp.return_value.__enter__.return_value = server
        return server

    @patch("email_sender.smtplib.SMTP")
    def test_send_news_summary_email(self, mock_smtp):
        server = self.smtp_mock(mock_smtp)

        self.sender.send_news_summary_email("ann@example.com", "Sunday, October 18, 2026", "<p>x</p>")

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=5)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "secret")
        from_addr, to_addrs, raw = server.sendmail.call_args.args
        assert from_addr == "Signalist <news@example.com>"
        assert to_addrs == ["ann@example.com"]
        assert "Market News Summary Today - Sunday, October 18, 2026" in raw

    def test_message_parts(self):
        msg = self.sender.build_message("ann@example.com", "Subject", "<p>html</p>", "plain text")
        parts = msg.get_payload()
        assert msg["To"] == "ann@example.com"
        assert [p.get_content_type() for p in parts] == ["text/plain", "text/html"]

    @patch("email_sender.smtplib.SMTP")
    def test_no_login_without_credentials(self, mock_smtp):
        server = self.smtp_mock(mock_smtp)
        sender = EmailSender(host="localhost", port=25, username=None, password=None, starttls=False)

        sender.send("ann@example.com", "s", "<p/>", "t")

        server.starttls.assert_not_called()
        server.login.assert_not_called()
        server.sendmail.assert_called_once()

    @patch("email_sender.smtplib.SMTP")
    def test_smtp_error_propagates(self, mock_smtp):
        server = self.smtp_mock(mock_smtp)
        server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({"ann@example.com": (550, b"no")})

        with pytest.raises(smtplib.SMTPException):
            self.sender.send("ann@example.com", "s", "<p/>", "t")

    @patch("email_sender.smtplib.SMTP")
    def test_async_send(self, mock_smtp):
        server = self.smtp_mock(mock_smtp)

        asyncio.run(self.sender.send_digest_email("ann@example.com", "Sunday, October 18, 2026", "<p>x</p>"))

        server.sendmail.assert_called_once()
