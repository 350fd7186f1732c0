# tests/test_orchestrator.py
"""Tests for the audit orchestrator."""

import httpx
import pytest

from pageaudit.checks import CHECKS, DEFAULT_AUDIT_CHECKS, AuditCheck
from pageaudit.exceptions import HttpError, NetworkError, ParseError
from pageaudit.orchestrator import AuditOrchestrator
from conftest import PAGE_HTML, make_fetcher


class FailingCheck(AuditCheck):
    """A check that always raises."""

    def __init__(self, name, label):
        self.name = name
        self.label = label

    async def run(self, context):
        raise ParseError("boom")


class TestAuditOrchestrator:
    """Test suite for AuditOrchestrator."""

    @pytest.fixture
    def counting_handler(self, site_handler):
        """Wrap the site handler and record every request."""
        requests = []

        def handler(request):
            requests.append((request.method, str(request.url)))
            return site_handler(request)

        handler.requests = requests
        return handler

    @pytest.mark.asyncio
    async def test_full_audit_sections(self, counting_handler):
        """Test a full audit reports every default check."""
        async with make_fetcher(counting_handler) as fetcher:
            report = await AuditOrchestrator(fetcher).run_full_audit("https://example.com/")

        assert not report.failed
        assert set(report.sections) == set(DEFAULT_AUDIT_CHECKS)
        assert report.sections["seo"]["title"] == "Garden Guide"
        assert report.sections["keywords"]["keywords"][0] == ["tomatoes", 4]
        assert report.sections["broken_links"]["broken"] == ["https://other.example.org/seeds"]
        assert report.sections["tech"]["tech"]["hosting"] == "nginx"
        assert report.failed_checks() == []
        assert report.to_dict()["status"] == "success"

    @pytest.mark.asyncio
    async def test_document_fetched_once(self, counting_handler):
        """Test checks share one GET of the page."""
        async with make_fetcher(counting_handler) as fetcher:
            await AuditOrchestrator(fetcher).run_full_audit("https://example.com/")

        gets = [url for method, url in counting_handler.requests if method == "GET"]
        assert gets == ["https://example.com/"]

    @pytest.mark.asyncio
    async def test_failing_check_isolated(self, site_handler):
        """Test one failing check leaves the others' results intact."""
        checks = dict(CHECKS, keywords=FailingCheck("keywords", "Keywords"))

        async with make_fetcher(site_handler) as fetcher:
            report = await AuditOrchestrator(fetcher, checks=checks).run_full_audit("https://example.com/")

        assert report.sections["keywords"] == {
            "error": "Keywords Failed",
            "kind": "ParseError",
            "details": "boom",
        }
        assert report.sections["seo"]["h1"] == "Growing Tomatoes"
        assert report.sections["headings"]["headings"]["h2"] == ["Soil"]
        assert "words" in report.sections["wordcount"]
        assert report.failed_checks() == ["keywords"]
        assert report.to_dict()["status"] == "success"

    @pytest.mark.asyncio
    async def test_fetch_failure_fails_audit(self):
        """Test an unreachable page fails the whole audit."""
        async with make_fetcher(lambda request: httpx.Response(500)) as fetcher:
            report = await AuditOrchestrator(fetcher).run_full_audit("https://example.com/")

        assert report.failed
        assert report.sections == {}
        assert report.to_dict() == {
            "error": "Audit Failed",
            "details": "Request failed with status code 500",
            "status": "error",
        }

    @pytest.mark.asyncio
    async def test_run_check_single(self, site_handler):
        """Test a single check returns its payload."""
        async with make_fetcher(site_handler) as fetcher:
            payload = await AuditOrchestrator(fetcher).run_check("seo", "https://example.com/")

        assert payload == {
            "title": "Garden Guide",
            "description": "Growing tomatoes at home",
            "h1": "Growing Tomatoes",
        }

    @pytest.mark.asyncio
    async def test_run_check_propagates_errors(self):
        """Test single-check failures are raised to the caller."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with make_fetcher(handler) as fetcher:
            with pytest.raises(NetworkError):
                await AuditOrchestrator(fetcher).run_check("seo", "https://example.com/")

    @pytest.mark.asyncio
    async def test_run_check_without_document(self):
        """Test checks that need no document skip the page fetch."""
        requested = []

        def handler(request):
            requested.append(request.url.path)
            return httpx.Response(404)

        async with make_fetcher(handler) as fetcher:
            with pytest.raises(HttpError):
                await AuditOrchestrator(fetcher).run_check("robots", "https://example.com/page")

        assert requested == ["/robots.txt"]

    def test_unknown_check(self):
        """Test unknown check names raise KeyError."""
        orchestrator = AuditOrchestrator(make_fetcher(lambda r: httpx.Response(200, html=PAGE_HTML)))
        with pytest.raises(KeyError):
            orchestrator.get_check("nope")
