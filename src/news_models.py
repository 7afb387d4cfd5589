"""
News and digest value objects

Raw Finnhub articles, the formatted items handed to the UI / summarizer,
and the per-recipient bookkeeping used by the daily digest run.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawNewsItem:
    """Article as returned by the upstream feed (fields may be missing)"""
    id: int | None = None
    headline: str | None = None
    summary: str | None = None
    url: str | None = None
    datetime: int | None = None  # unix seconds
    source: str | None = None
    image: str | None = None
    category: str | None = None
    related: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawNewsItem":
        return cls(
            id=data.get("id"),
            headline=data.get("headline"),
            summary=data.get("summary"),
            url=data.get("url"),
            datetime=data.get("datetime"),
            source=data.get("source"),
            image=data.get("image"),
            category=data.get("category"),
            related=data.get("related"),
        )

    def dedup_key(self) -> str:
        return f"{self.id}-{self.url}-{self.headline}"


@dataclass(frozen=True)
class FormattedNewsItem:
    """
    Article shaped for display and summarization.

    Company-mode ids are render-only tokens (time + random), never use
    them for persistence or deduplication.
    """
    id: int | float | str
    headline: str
    summary: str
    source: str
    url: str
    datetime: int
    image: str
    category: str
    related: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Recipient:
    """Minimal projection of a user record for the digest run"""
    id: str
    email: str
    name: str


@dataclass
class DigestResult:
    """Per-recipient intermediate result; summary_text is None when summarization failed"""
    recipient: Recipient
    articles: list[FormattedNewsItem] = field(default_factory=list)
    summary_text: str | None = None


STATUS_SENT = "sent"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class DeliveryOutcome:
    """What happened to one recipient's email"""
    email: str
    status: str  # sent, skipped, failed
    reason: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class DigestRunResult:
    """Outcome of one full digest run"""
    success: bool
    message: str
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    def count(self, status: str) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "sent": self.count(STATUS_SENT),
            "skipped": self.count(STATUS_SKIPPED),
            "failed": self.count(STATUS_FAILED),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }
