"""Individual audit checks.

Each check reads the shared, already-fetched document (or fetches a sibling
resource such as robots.txt) and returns its payload as a plain dict. A check
signals failure by raising; shaping that failure is left to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from xml.etree import ElementTree as ET

from pageaudit.config import Config
from pageaudit.constants import (
    COMMON_META_TAGS,
    LINK_SAMPLE_LIMIT,
    MISSING_ALT_SAMPLE_LIMIT,
    SITEMAP_URL_LIMIT,
)
from pageaudit.document import HtmlDocument
from pageaudit.exceptions import ParseError
from pageaudit.fetcher import Fetcher
from pageaudit.keywords import KeywordExtractor
from pageaudit.link_prober import LinkHealthProber, summarize_links
from pageaudit.models import FetchResult, LinkClassification
from pageaudit.tech_signature import TechnologyDetector
from pageaudit.text_metrics import TextMetricsAnalyzer, readability_grade
from pageaudit.url_resolver import URLResolver, origin_of

logger = logging.getLogger(__name__)


@dataclass
class AuditContext:
    """Everything a check may read. The document is shared, never re-fetched."""

    url: str
    fetcher: Fetcher
    config: Config = field(default_factory=Config)
    fetch_result: Optional[FetchResult] = None
    document: Optional[HtmlDocument] = None

    def require_document(self) -> HtmlDocument:
        if self.document is None:
            raise ParseError(f"No document available for {self.url}")
        return self.document

    @property
    def base_url(self) -> str:
        return self.fetch_result.final_url if self.fetch_result else self.url

    def origin(self) -> str:
        origin = origin_of(self.url)
        if origin is None:
            raise ParseError(f"Invalid URL: {self.url}")
        return origin


class AuditCheck:
    """Base class for checks."""

    name = ""
    label = ""
    requires_document = True

    async def run(self, context: AuditContext) -> dict[str, Any]:
        raise NotImplementedError

    def failure_payload(self, error: Exception) -> dict[str, Any]:
        """Body reported by a single-check endpoint when the check fails."""
        return {"error": "Failed", "details": str(error)}

    def failure_marker(self, error: Exception) -> dict[str, Any]:
        """Section stored in a full audit report when the check fails."""
        return {
            "error": f"{self.label} Failed",
            "kind": type(error).__name__,
            "details": str(error),
        }


class SEOMetadataCheck(AuditCheck):
    name = "seo"
    label = "SEO"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        document = context.require_document()
        return {
            "title": document.title,
            "description": document.meta_content("description"),
            "h1": document.text_of(document.first("h1")) or None,
        }


class MetaTagsCheck(AuditCheck):
    name = "meta"
    label = "Meta"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        metas = context.require_document().meta_tags()
        present = {key.lower() for key in metas}
        return {
            "metas": metas,
            "missing": [tag for tag in COMMON_META_TAGS if tag not in present],
        }


class ImageAltCheck(AuditCheck):
    name = "alts"
    label = "Alts"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        document = context.require_document()
        images = [
            {"src": document.attribute(img, "src"), "alt": document.attribute(img, "alt")}
            for img in document.elements("img")
        ]
        missing = [img for img in images if not (img["alt"] or "").strip()]
        return {
            "total": len(images),
            "missing_count": len(missing),
            "missing": missing[:MISSING_ALT_SAMPLE_LIMIT],
        }


class HeadingsCheck(AuditCheck):
    name = "headings"
    label = "Headings"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        return {"headings": context.require_document().headings()}


class WordCountCheck(AuditCheck):
    name = "wordcount"
    label = "Wordcount"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        metrics = TextMetricsAnalyzer().analyze(context.require_document().visible_text())
        return {
            "words": metrics.word_count,
            "sentences": metrics.sentence_count,
            "syllables": metrics.syllable_count,
            "flesch_reading_score": metrics.readability_score,
            "readability_grade": readability_grade(metrics.readability_score),
            "read_time_min": metrics.estimated_read_minutes,
        }


class KeywordsCheck(AuditCheck):
    name = "keywords"
    label = "Keywords"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        extractor = KeywordExtractor(top_n=context.config.top_keywords)
        entries = extractor.extract(context.require_document().visible_text())
        return {"keywords": [[entry.term, entry.frequency] for entry in entries]}


class TechnologyCheck(AuditCheck):
    name = "tech"
    label = "Tech"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        document = context.require_document()
        fetch_result = context.fetch_result or FetchResult(final_url=context.url, status_code=0)
        return {"tech": TechnologyDetector().detect(document, fetch_result)}


class BrokenLinksCheck(AuditCheck):
    name = "broken_links"
    label = "Broken Links"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        prober = LinkHealthProber(context.fetcher, max_links=context.config.max_probe_links)
        records = await prober.probe(context.require_document(), context.base_url)
        return summarize_links(records)


class LinksReportCheck(AuditCheck):
    name = "links_report"
    label = "Links Report"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        resolver = URLResolver(context.base_url)
        internal, external = [], []
        for href in context.require_document().anchor_hrefs():
            resolved = resolver.resolve(href)
            if resolved is None:
                continue
            if resolved.classification is LinkClassification.INTERNAL:
                internal.append(resolved.resolved_url)
            else:
                external.append(resolved.resolved_url)
        return {
            "internal_count": len(internal),
            "external_count": len(external),
            "internal": internal[:LINK_SAMPLE_LIMIT],
            "external": external[:LINK_SAMPLE_LIMIT],
        }


class PageSpeedCheck(AuditCheck):
    name = "pagespeed"
    label = "Pagespeed"

    async def run(self, context: AuditContext) -> dict[str, Any]:
        document = context.require_document()
        fetch_result = context.fetch_result
        if fetch_result is None:
            raise ParseError(f"No response recorded for {context.url}")

        content_length = fetch_result.header("content-length")
        if content_length and content_length.isdigit():
            size_bytes = int(content_length)
        else:
            size_bytes = len(fetch_result.body.encode("utf-8"))

        resources = sum(len(document.elements(tag)) for tag in ("script", "link", "img"))
        return {
            "load_ms": fetch_result.elapsed_ms,
            "size_bytes": size_bytes,
            "resources": resources,
        }


class RobotsCheck(AuditCheck):
    name = "robots"
    label = "Robots"
    requires_document = False

    async def run(self, context: AuditContext) -> dict[str, Any]:
        result = await context.fetcher.fetch(context.origin() + "/robots.txt")
        return {"robots": result.body}

    def failure_payload(self, error: Exception) -> dict[str, Any]:
        return {"error": "Not found", "status": "error"}


class SitemapCheck(AuditCheck):
    name = "sitemap"
    label = "Sitemap"
    requires_document = False

    async def run(self, context: AuditContext) -> dict[str, Any]:
        result = await context.fetcher.fetch(context.origin() + "/sitemap.xml")
        return {"urls": self.parse_locations(result.body)[:SITEMAP_URL_LIMIT]}

    @staticmethod
    def parse_locations(content: str) -> list[str]:
        """All <loc> values of a urlset or sitemap index, namespace-agnostic."""
        try:
            root = ET.fromstring(content.strip())
        except ET.ParseError as e:
            logger.warning(f"Failed to parse sitemap XML: {e}")
            return []
        return [
            element.text.strip()
            for element in root.iter()
            if element.tag.split('}')[-1] == 'loc' and element.text and element.text.strip()
        ]

    def failure_payload(self, error: Exception) -> dict[str, Any]:
        return {"error": "Not found", "status": "error"}


CHECKS: dict[str, AuditCheck] = {
    check.name: check
    for check in (
        SEOMetadataCheck(),
        BrokenLinksCheck(),
        MetaTagsCheck(),
        ImageAltCheck(),
        RobotsCheck(),
        SitemapCheck(),
        PageSpeedCheck(),
        LinksReportCheck(),
        HeadingsCheck(),
        WordCountCheck(),
        KeywordsCheck(),
        TechnologyCheck(),
    )
}

# Checks run by a full audit
DEFAULT_AUDIT_CHECKS = ("seo", "wordcount", "keywords", "broken_links", "headings", "tech")
