"""
News Summarizer - LLM-Powered Digest Text

Turns a recipient's article list into the HTML fragment embedded in the
daily digest email.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging

from llm_provider import LLMProvider, create_llm_provider, response_text
from news_models import FormattedNewsItem


logger = logging.getLogger(__name__)

NO_NEWS_FALLBACK = "No market news."

NEWS_SUMMARY_EMAIL_PROMPT = """You are writing the market news section of a daily email for a retail investor.

Here are today's news articles as JSON (headline, summary, source, url, unix datetime, related ticker):

{{newsData}}

Write a concise, friendly summary that:
1. Opens with a one-sentence overview of the day's market mood
2. Covers the most important stories, naming companies, tickers and numbers
3. Explains in plain language why each story matters to an investor
4. Links each story to its url with "Read more"

FORMAT REQUIREMENTS:
- Return an HTML fragment only (no <html>, <head> or <body> tags, no markdown, no code fences)
- Use <h3> for section headings, <p> for paragraphs, <ul>/<li> for lists and <a href> for links
- Use inline styles only, light text on a dark background (#141414)

If the article list is empty, say briefly that there is no notable market news today."""


def articles_to_json(articles: list[FormattedNewsItem]) -> str:
    return json.dumps([article.to_dict() for article in articles], indent=2)


def build_summary_prompt(articles: list[FormattedNewsItem]) -> str:
    return NEWS_SUMMARY_EMAIL_PROMPT.replace("{{newsData}}", articles_to_json(articles))


def strip_code_fences(text: str) -> str:
    # Models occasionally wrap the fragment in ```html fences despite instructions
    stripped = text.strip()
    if stripped.startswith("```"):
        stripped = stripped.split("\n", 1)[1] if "\n" in stripped else ""
        if stripped.rstrip().endswith("```"):
            stripped = stripped.rstrip()[:-3]
    return stripped.strip()


class NewsSummarizer:
    """Summarize article lists with the configured digest model"""

    def __init__(self, llm_provider: LLMProvider | None = None, temperature: float = 0.7, max_tokens: int = 2048):
        """
        Args:
            llm_provider: Provider to use (created from settings on first use if None)
            temperature: Sampling temperature
            max_tokens: Response token cap
        """
        self._llm_provider = llm_provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def llm_provider(self) -> LLMProvider:
        if self._llm_provider is None:
            self._llm_provider = create_llm_provider()
        return self._llm_provider

    async def summarize(self, prompt: str) -> str:
        """
        Run one summarization prompt.

        Raises:
            Exception: Any LLM failure (callers isolate per recipient)
        """
        response = await self.llm_provider.acompletion(
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        text = response_text(response)
        if not text or not text.strip():
            logger.warning("LLM returned an empty summary, using fallback text")
            return NO_NEWS_FALLBACK
        return strip_code_fences(text)
