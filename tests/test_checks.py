# tests/test_checks.py
"""Tests for individual audit checks."""

import httpx
import pytest

from pageaudit.checks import CHECKS, SitemapCheck
from pageaudit.document import HtmlDocument
from pageaudit.exceptions import HttpError
from pageaudit.orchestrator import AuditOrchestrator
from pageaudit.text_metrics import TextMetricsAnalyzer, readability_grade
from conftest import PAGE_HTML, make_fetcher


URL = "https://example.com/"


async def run(name, handler):
    async with make_fetcher(handler) as fetcher:
        return await AuditOrchestrator(fetcher).run_check(name, URL)


class TestDocumentChecks:
    """Test suite for checks that read the fetched page."""

    @pytest.mark.asyncio
    async def test_meta(self, site_handler):
        """Test meta tags are collected and common ones reported missing."""
        payload = await run("meta", site_handler)

        assert payload["metas"] == {
            "description": "Growing tomatoes at home",
            "generator": "WordPress 6.4",
        }
        assert payload["missing"] == ["keywords", "viewport", "og:title"]

    @pytest.mark.asyncio
    async def test_alts(self, site_handler):
        """Test images without alt text are reported."""
        payload = await run("alts", site_handler)

        assert payload["total"] == 2
        assert payload["missing_count"] == 1
        assert payload["missing"] == [{"src": "/images/tomato.jpg", "alt": ""}]

    @pytest.mark.asyncio
    async def test_links_report(self, site_handler):
        """Test anchors are split into internal and external."""
        payload = await run("links_report", site_handler)

        assert payload["internal"] == ["https://example.com/", "https://example.com/guide"]
        assert payload["external"] == ["https://other.example.org/seeds"]
        assert payload["internal_count"] == 2
        assert payload["external_count"] == 1

    @pytest.mark.asyncio
    async def test_wordcount_ignores_non_content(self, site_handler):
        """Test script, nav and footer text is not counted."""
        payload = await run("wordcount", site_handler)
        keywords = dict((term, freq) for term, freq in (await run("keywords", site_handler))["keywords"])

        assert payload["sentences"] >= 3
        assert 0 <= payload["flesch_reading_score"] <= 100
        assert payload["read_time_min"] == 1
        assert payload["readability_grade"] == readability_grade(payload["flesch_reading_score"])
        assert "tracking" not in keywords
        assert "navigation" not in keywords
        assert "footer" not in keywords

    @pytest.mark.asyncio
    async def test_tech(self, site_handler):
        """Test CMS, frameworks and server header are detected."""
        payload = await run("tech", site_handler)

        assert payload["tech"]["cms"] == "WordPress 6.4"
        assert "WordPress" in payload["tech"]["frameworks"]
        assert "jQuery" in payload["tech"]["frameworks"]
        assert payload["tech"]["hosting"] == "nginx"

    @pytest.mark.asyncio
    async def test_pagespeed(self, site_handler):
        """Test size and resource counts come from the fetched page."""
        payload = await run("pagespeed", site_handler)

        assert payload["size_bytes"] == len(PAGE_HTML.encode("utf-8"))
        assert payload["resources"] == 5
        assert payload["load_ms"] >= 0

    def test_inline_markup_keeps_words_whole(self):
        """Test inline tags inside a sentence do not split words."""
        document = HtmlDocument(
            "<html><body><p>Read the <a href=\"/g\">guide</a>. It is un<b>believ</b>able.</p></body></html>"
        )
        text = document.visible_text()

        assert text == "Read the guide. It is unbelievable."
        assert TextMetricsAnalyzer().analyze(text).word_count == 6

    def test_document_left_intact(self, page_html):
        """Test reading visible text does not remove elements."""
        document = HtmlDocument(page_html)
        document.visible_text()

        assert len(document.elements("script")) == 2
        assert document.first("nav") is not None


class TestSiteFileChecks:
    """Test suite for robots.txt and sitemap.xml checks."""

    @pytest.mark.asyncio
    async def test_robots(self):
        """Test robots.txt is fetched from the origin."""
        def handler(request):
            assert request.url.path == "/robots.txt"
            return httpx.Response(200, text="User-agent: *\nDisallow:")

        payload = await run("robots", handler)
        assert payload == {"robots": "User-agent: *\nDisallow:"}

    @pytest.mark.asyncio
    async def test_robots_missing(self):
        """Test a missing robots.txt raises and maps to Not found."""
        with pytest.raises(HttpError) as exc_info:
            await run("robots", lambda request: httpx.Response(404))

        assert CHECKS["robots"].failure_payload(exc_info.value) == {"error": "Not found", "status": "error"}

    @pytest.mark.asyncio
    async def test_sitemap(self):
        """Test sitemap locations are listed."""
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            '<url><loc>https://example.com/a</loc></url>'
            '<url><loc> https://example.com/b </loc></url>'
            '</urlset>'
        )
        payload = await run("sitemap", lambda request: httpx.Response(200, text=body))
        assert payload == {"urls": ["https://example.com/a", "https://example.com/b"]}

    def test_sitemap_index_and_garbage(self):
        """Test index files parse and malformed XML yields nothing."""
        index = "<sitemapindex><sitemap><loc>https://example.com/s1.xml</loc></sitemap></sitemapindex>"
        assert SitemapCheck.parse_locations(index) == ["https://example.com/s1.xml"]
        assert SitemapCheck.parse_locations("<not xml") == []

    def test_failure_payload_default(self):
        """Test generic checks report Failed with details."""
        assert CHECKS["seo"].failure_payload(ValueError("bad")) == {"error": "Failed", "details": "bad"}
