"""
Email Sender

SMTP delivery of the daily news summary email.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import constants as const
from email_templates import NEWS_SUMMARY_EMAIL_TEMPLATE


logger = logging.getLogger(__name__)


def render_news_summary_email(date_label: str, news_content: str) -> str:
    return NEWS_SUMMARY_EMAIL_TEMPLATE.replace("{{date}}", date_label).replace("{{newsContent}}", news_content)


class EmailSender:
    """Send HTML emails through an SMTP relay"""

    def __init__(
        self,
        host: str = const.SMTP_HOST,
        port: int = const.SMTP_PORT,
        username: str | None = const.SMTP_USERNAME,
        password: str | None = const.SMTP_PASSWORD,
        starttls: bool = const.SMTP_STARTTLS,
        sender: str = const.EMAIL_FROM,
        timeout: int = const.SMTP_TIMEOUT_SECONDS,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.starttls = starttls
        self.sender = sender
        self.timeout = timeout

    def build_message(self, to: str, subject: str, html_body: str, text_body: str) -> MIMEMultipart:
        # multipart/alternative: plain-text fallback first, HTML preferred
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def send(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        """
        Send one email.

        Raises:
            smtplib.SMTPException: If the relay rejects the message or login
            OSError: If the relay cannot be reached
        """
        msg = self.build_message(to, subject, html_body, text_body)

        logger.debug(f"Connecting to SMTP server: {self.host}:{self.port}")
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.sender, [to], msg.as_string())

        logger.info(f"Email sent to {to}: {subject}")

    def send_news_summary_email(self, email: str, date_label: str, news_content: str) -> None:
        """
        Send the daily digest.

        Args:
            email: Recipient address
            date_label: Human readable date, e.g. 'Sunday, October 18, 2026'
            news_content: Pre-rendered HTML summary
        """
        html = render_news_summary_email(date_label, news_content)
        self.send(
            to=email,
            subject=f"Market News Summary Today - {date_label}",
            html_body=html,
            text_body=f"Today's market news summary from {const.APP_NAME}",
        )

    async def send_digest_email(self, email: str, date_label: str, news_content: str) -> None:
        """Async wrapper; smtplib blocks, so it runs in a worker thread."""
        await asyncio.to_thread(self.send_news_summary_email, email, date_label, news_content)
