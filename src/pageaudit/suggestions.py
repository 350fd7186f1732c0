"""Keyword research: autocomplete suggestions, questions and comparisons."""

import json
import logging
from typing import Optional
from urllib.parse import urlencode

from pageaudit.constants import (
    DEFAULT_SUGGESTION_COUNT,
    GOOGLE_SUGGEST_URL,
    MAX_QUESTIONS,
    QUESTION_MODIFIERS,
    SUGGESTION_MODIFIERS,
)
from pageaudit.exceptions import PageAuditError, ParseError
from pageaudit.fetcher import Fetcher

logger = logging.getLogger(__name__)


def _unique(items) -> list[str]:
    seen = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out


def related_keywords(keyword: str, count: int = DEFAULT_SUGGESTION_COUNT) -> list[str]:
    """Locally generated variations of a keyword.

    The base phrase is the keyword's first three words. Each modifier is
    tried as a prefix and then as a suffix, so the list is deterministic and
    never longer than the distinct candidates available.
    """
    base = " ".join(keyword.split()[:3])
    candidates = [base]
    for modifier in SUGGESTION_MODIFIERS:
        candidates.append(f"{modifier} {base}".strip())
        candidates.append(f"{base} {modifier}".strip())
    return _unique(candidates)[:count]


class KeywordSuggester:
    """Fetches autocomplete suggestions and derives question/comparison lists."""

    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher

    async def fetch_suggestions(self, query: str) -> list[str]:
        """Autocomplete suggestions for a query; empty on any failure."""
        url = f"{GOOGLE_SUGGEST_URL}?{urlencode({'client': 'firefox', 'q': query})}"
        try:
            result = await self.fetcher.fetch(url)
            return self._parse(result.body)
        except PageAuditError as e:
            logger.warning(f"Suggest lookup failed for {query!r}: {e.message}")
            return []

    @staticmethod
    def _parse(body: str) -> list[str]:
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise ParseError(f"Suggest response is not JSON: {e}") from e
        if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
            raise ParseError("Unexpected suggest response shape")
        return [s for s in payload[1] if isinstance(s, str)]

    async def suggestions(self, keyword: str, count: int = DEFAULT_SUGGESTION_COUNT) -> list[str]:
        """Live suggestions, or generated variations when none come back."""
        live = await self.fetch_suggestions(keyword)
        return live[:count] if live else related_keywords(keyword, count)

    async def questions(self, keyword: str) -> list[str]:
        """Question-style queries around a keyword."""
        how_to = await self.fetch_suggestions(f"how to {keyword}")
        what_is = await self.fetch_suggestions(f"what is {keyword}")
        questions = _unique(how_to + what_is)
        if not questions:
            questions = [f"{modifier} {keyword}" for modifier in QUESTION_MODIFIERS]
        return questions[:MAX_QUESTIONS]

    async def comparisons(self, keyword: Optional[str] = None, keywords: Optional[str] = None) -> list[str]:
        """Comparison terms from an explicit comma list or from "<keyword> vs" suggestions."""
        if keywords:
            return [k.strip() for k in keywords.split(",") if k.strip()]
        if keyword:
            return await self.fetch_suggestions(f"{keyword} vs")
        return []
