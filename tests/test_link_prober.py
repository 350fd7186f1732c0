# tests/test_link_prober.py
"""Tests for link health probing."""

import httpx
import pytest

from pageaudit.document import HtmlDocument
from pageaudit.link_prober import LinkHealthProber, summarize_links
from pageaudit.models import LinkClassification, Reachability
from conftest import make_fetcher


class TestLinkHealthProber:
    """Test suite for LinkHealthProber."""

    @pytest.fixture
    def document(self, page_html):
        """Parse the sample page."""
        return HtmlDocument(page_html)

    def test_discover_resolves_and_filters(self, document):
        """Test discovery resolves references and drops fragments and mailto."""
        prober = LinkHealthProber(make_fetcher(lambda r: httpx.Response(200)))
        records = prober.discover(document, "https://example.com/")

        assert [r.resolved_url for r in records] == [
            "https://example.com/wp-content/themes/site/style.css",
            "https://cdn.example.net/jquery-3.7.1.min.js",
            "https://example.com/",
            "https://example.com/guide",
            "https://other.example.org/seeds",
            "https://example.com/images/tomato.jpg",
            "https://example.com/images/soil.jpg",
        ]
        assert records[1].classification == LinkClassification.EXTERNAL
        assert records[2].classification == LinkClassification.INTERNAL

    @pytest.mark.asyncio
    async def test_probe_marks_broken(self, document, site_handler):
        """Test a 404 is broken while 200s are ok."""
        async with make_fetcher(site_handler) as fetcher:
            records = await LinkHealthProber(fetcher).probe(document, "https://example.com/")

        by_url = {r.resolved_url: r.reachability for r in records}
        seeds = by_url["https://other.example.org/seeds"]
        assert seeds.kind == Reachability.BROKEN
        assert seeds.status_code == 404
        assert by_url["https://example.com/guide"].kind == Reachability.OK

        summary = summarize_links(records)
        assert summary["total"] == 7
        assert summary["broken"] == ["https://other.example.org/seeds"]

    @pytest.mark.asyncio
    async def test_probes_use_head(self, document):
        """Test every probe is a HEAD request."""
        methods = set()

        def handler(request):
            methods.add(request.method)
            return httpx.Response(200)

        async with make_fetcher(handler) as fetcher:
            await LinkHealthProber(fetcher).probe(document, "https://example.com/")

        assert methods == {"HEAD"}

    @pytest.mark.asyncio
    async def test_timeout_isolated(self):
        """Test one timing-out link does not affect its siblings."""
        document = HtmlDocument(
            '<a href="/slow">s</a><a href="/fast">f</a><a href="/gone">g</a>'
        )

        def handler(request):
            if request.url.path == "/slow":
                raise httpx.ReadTimeout("timed out", request=request)
            if request.url.path == "/gone":
                return httpx.Response(410)
            return httpx.Response(204)

        async with make_fetcher(handler) as fetcher:
            records = await LinkHealthProber(fetcher).probe(document, "https://example.com/")

        outcomes = {r.resolved_url: r.reachability for r in records}
        assert outcomes["https://example.com/slow"].is_broken
        assert outcomes["https://example.com/slow"].timed_out
        assert outcomes["https://example.com/fast"].kind == Reachability.OK
        assert outcomes["https://example.com/gone"].status_code == 410

    @pytest.mark.asyncio
    async def test_unexpected_error_is_unknown(self):
        """Test an unexpected probe error yields unknown reachability."""
        document = HtmlDocument('<a href="/odd">o</a><a href="/fine">f</a>')

        def handler(request):
            if request.url.path == "/odd":
                raise RuntimeError("transport bug")
            return httpx.Response(200)

        async with make_fetcher(handler) as fetcher:
            records = await LinkHealthProber(fetcher).probe(document, "https://example.com/")

        assert records[0].reachability.kind == Reachability.UNKNOWN
        assert records[1].reachability.kind == Reachability.OK

    @pytest.mark.asyncio
    async def test_probe_cap(self):
        """Test no more than max_links URLs are probed."""
        document = HtmlDocument("".join(f'<a href="/p{i}">{i}</a>' for i in range(45)))
        probed = []

        def handler(request):
            probed.append(str(request.url))
            return httpx.Response(200)

        async with make_fetcher(handler) as fetcher:
            records = await LinkHealthProber(fetcher, max_links=30).probe(document, "https://example.com/")

        assert len(records) == 30
        assert len(probed) == 30
        assert records[-1].resolved_url == "https://example.com/p29"

    @pytest.mark.asyncio
    async def test_duplicates_probed_once(self):
        """Test references resolving to the same URL are probed once."""
        document = HtmlDocument('<a href="/a">1</a><a href="/a">2</a><a href="https://example.com/a">3</a>')
        probed = []

        def handler(request):
            probed.append(str(request.url))
            return httpx.Response(200)

        async with make_fetcher(handler) as fetcher:
            records = await LinkHealthProber(fetcher).probe(document, "https://example.com/")

        assert len(records) == 1
        assert probed == ["https://example.com/a"]
