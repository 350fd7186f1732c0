"""Reachability probing of a page's outbound references."""

import logging

from pageaudit.concurrency import settle_all
from pageaudit.constants import HTTP_ERROR_STATUS, MAX_PROBE_LINKS
from pageaudit.document import HtmlDocument
from pageaudit.exceptions import HttpError, NetworkError
from pageaudit.fetcher import Fetcher
from pageaudit.models import LinkRecord, ProbeOutcome
from pageaudit.url_resolver import URLResolver

logger = logging.getLogger(__name__)


class LinkHealthProber:
    """Discovers a page's references and checks each one with a HEAD request."""

    def __init__(self, fetcher: Fetcher, max_links: int = MAX_PROBE_LINKS):
        """Initialize the prober.

        Args:
            fetcher: Fetcher used for probes
            max_links: Ceiling on probed URLs per page
        """
        self.fetcher = fetcher
        self.max_links = max_links

    def discover(self, document: HtmlDocument, source_url: str) -> list[LinkRecord]:
        """Resolve, deduplicate and cap the page's references (no network)."""
        resolver = URLResolver(source_url)
        resolved = resolver.resolve_all(document.references())
        if len(resolved) > self.max_links:
            logger.debug(f"Capping {len(resolved)} references on {source_url} to {self.max_links}")
        return [
            LinkRecord(
                raw_reference=ref.raw_reference,
                resolved_url=ref.resolved_url,
                classification=ref.classification,
            )
            for ref in resolved[:self.max_links]
        ]

    async def probe_url(self, url: str) -> ProbeOutcome:
        """Probe one URL. Failures are folded into the outcome, never raised."""
        try:
            result = await self.fetcher.head(url, raise_for_status=False)
        except NetworkError as e:
            logger.debug(f"Probe of {url} failed: {e.message}")
            return ProbeOutcome.broken_timeout()
        except HttpError as e:
            return ProbeOutcome.broken_status(e.status_code)

        if result.status_code >= HTTP_ERROR_STATUS:
            return ProbeOutcome.broken_status(result.status_code)
        return ProbeOutcome.ok(result.status_code)

    async def probe(self, document: HtmlDocument, source_url: str) -> list[LinkRecord]:
        """Discover and probe all references concurrently.

        Args:
            document: Parsed page
            source_url: URL the page was fetched from

        Returns:
            LinkRecords in discovery order, each with its reachability set
        """
        records = self.discover(document, source_url)
        outcomes = await settle_all(self.probe_url(r.resolved_url) for r in records)

        for record, settled in zip(records, outcomes):
            if settled.ok:
                record.reachability = settled.value
            else:
                logger.warning(f"Unexpected probe error for {record.resolved_url}: {settled.error!r}")
                record.reachability = ProbeOutcome()

        broken = sum(1 for r in records if r.reachability.is_broken)
        logger.info(f"Probed {len(records)} links on {source_url}: {broken} broken")
        return records


def summarize_links(records: list[LinkRecord]) -> dict:
    """Shape probe results as the broken-links check payload."""
    return {
        "total": len(records),
        "broken": [r.resolved_url for r in records if r.reachability.is_broken],
        "links": [r.to_dict() for r in records],
    }
