# tests/test_suggestions.py
"""Tests for keyword suggestions, questions and comparisons."""

import json

import httpx
import pytest

from pageaudit.constants import QUESTION_MODIFIERS
from pageaudit.suggestions import KeywordSuggester, related_keywords
from conftest import make_fetcher


def suggest_handler(responses):
    """Answer suggest queries from a query -> suggestions mapping."""
    def handler(request):
        query = request.url.params["q"]
        if query not in responses:
            return httpx.Response(200, text=json.dumps([query, []]))
        return httpx.Response(200, text=json.dumps([query, responses[query]]))
    return handler


class TestRelatedKeywords:
    """Test suite for related_keywords."""

    def test_deterministic(self):
        """Test variations are stable and start with the base phrase."""
        first = related_keywords("garden tools for sale today")

        assert first == related_keywords("garden tools for sale today")
        assert first[0] == "garden tools for"
        assert "best garden tools for" in first
        assert len(first) == len(set(first))

    def test_count(self):
        """Test the list is capped at count."""
        assert len(related_keywords("garden", count=3)) == 3


class TestKeywordSuggester:
    """Test suite for KeywordSuggester."""

    @pytest.mark.asyncio
    async def test_live_suggestions(self):
        """Test suggestions come from the autocomplete response."""
        handler = suggest_handler({"garden": ["garden tools", "garden hose"]})
        async with make_fetcher(handler) as fetcher:
            suggestions = await KeywordSuggester(fetcher).suggestions("garden")

        assert suggestions == ["garden tools", "garden hose"]

    @pytest.mark.asyncio
    async def test_fallback_on_failure(self):
        """Test a failed lookup falls back to generated variations."""
        async with make_fetcher(lambda request: httpx.Response(500)) as fetcher:
            suggestions = await KeywordSuggester(fetcher).suggestions("garden", count=5)

        assert suggestions == related_keywords("garden", 5)

    @pytest.mark.asyncio
    async def test_malformed_response_is_empty(self):
        """Test non-JSON bodies yield no live suggestions."""
        async with make_fetcher(lambda request: httpx.Response(200, text="<html>")) as fetcher:
            assert await KeywordSuggester(fetcher).fetch_suggestions("garden") == []

    @pytest.mark.asyncio
    async def test_questions_deduplicated(self):
        """Test question suggestions are merged without duplicates."""
        handler = suggest_handler({
            "how to garden": ["how to garden", "how to garden cheaply"],
            "what is garden": ["what is garden", "how to garden"],
        })
        async with make_fetcher(handler) as fetcher:
            questions = await KeywordSuggester(fetcher).questions("garden")

        assert questions == ["how to garden", "how to garden cheaply", "what is garden"]

    @pytest.mark.asyncio
    async def test_questions_fallback(self):
        """Test modifiers are used when no questions come back."""
        async with make_fetcher(suggest_handler({})) as fetcher:
            questions = await KeywordSuggester(fetcher).questions("garden")

        assert questions == [f"{m} garden" for m in QUESTION_MODIFIERS]

    @pytest.mark.asyncio
    async def test_comparisons(self):
        """Test explicit lists are split and otherwise "vs" suggestions are used."""
        handler = suggest_handler({"garden vs": ["garden vs yard"]})
        async with make_fetcher(handler) as fetcher:
            suggester = KeywordSuggester(fetcher)

            assert await suggester.comparisons(keywords="a, b,,c ") == ["a", "b", "c"]
            assert await suggester.comparisons(keyword="garden") == ["garden vs yard"]
            assert await suggester.comparisons() == []
