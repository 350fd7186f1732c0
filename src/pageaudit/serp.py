"""Search result retrieval with provider cascade and simulated fallback."""

import logging
import re
from typing import Optional, Sequence
from urllib.parse import parse_qs, quote_plus, urlsplit

from bs4.element import Tag

from pageaudit.constants import (
    BING_SEARCH_URL,
    DUCKDUCKGO_SEARCH_URL,
    MAX_SERP_RESULTS,
    SIMULATED_RESULT_LINK,
    SIMULATED_RESULT_SNIPPET,
)
from pageaudit.document import HtmlDocument
from pageaudit.exceptions import PageAuditError
from pageaudit.fetcher import Fetcher
from pageaudit.models import SerpEntry

logger = logging.getLogger(__name__)

# (title, link, snippet) before ranking
RawResult = tuple[str, str, str]


class SearchProvider:
    """A search surface and the rules for reading its result markup."""

    name = "provider"
    search_url = ""

    def build_url(self, keyword: str) -> str:
        return f"{self.search_url}?q={quote_plus(keyword)}"

    def parse(self, document: HtmlDocument) -> list[RawResult]:
        raise NotImplementedError

    @staticmethod
    def _text(element: Optional[Tag]) -> str:
        return element.get_text(strip=True) if element is not None else ""


class BingProvider(SearchProvider):
    name = "bing"
    search_url = BING_SEARCH_URL

    def parse(self, document: HtmlDocument) -> list[RawResult]:
        results = []
        for item in document.by_class("b_algo", tag="li"):
            heading = item.find("h2")
            anchor = heading.find("a") if heading is not None else None
            caption = item.find(class_="b_caption")
            snippet = caption.find("p") if caption is not None else None

            title = self._text(heading)
            link = HtmlDocument.attribute(anchor, "href") or ""
            if title and link:
                results.append((title, link, self._text(snippet)))
        return results


class DuckDuckGoProvider(SearchProvider):
    name = "duckduckgo"
    search_url = DUCKDUCKGO_SEARCH_URL

    def parse(self, document: HtmlDocument) -> list[RawResult]:
        results = []
        for body in document.by_class("result__body"):
            title = self._text(body.find(class_="result__title"))
            link = self._unwrap(HtmlDocument.attribute(body.find(class_="result__a"), "href") or "")
            snippet = self._text(body.find(class_="result__snippet")) or "..."
            if title and link:
                results.append((title, link, snippet))
        return results

    @staticmethod
    def _unwrap(href: str) -> str:
        """Return the target of a ``/l/?uddg=`` redirect link, else the href."""
        if "uddg=" not in href:
            return href
        target = parse_qs(urlsplit(href).query).get("uddg")
        return target[0] if target else href


DEFAULT_PROVIDERS: tuple[SearchProvider, ...] = (BingProvider(), DuckDuckGoProvider())


def simulated_results(keyword: str, count: int = MAX_SERP_RESULTS) -> list[SerpEntry]:
    """Deterministic placeholder results derived from the keyword."""
    slug = re.sub(r"\s+", "-", keyword.strip()) or "search"
    return [
        SerpEntry(
            rank=rank,
            title=f"{keyword} - Search Result {rank}",
            link=SIMULATED_RESULT_LINK.format(slug=slug, rank=rank),
            snippet=SIMULATED_RESULT_SNIPPET.format(keyword=keyword),
        )
        for rank in range(1, count + 1)
    ]


class SerpResolver:
    """Queries providers in priority order and returns the first usable result set.

    Provider failures are logged and skipped. When no provider yields results,
    a simulated set is returned so callers always get entries.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        providers: Optional[Sequence[SearchProvider]] = None,
        max_results: int = MAX_SERP_RESULTS,
    ):
        self.fetcher = fetcher
        self.providers = tuple(providers) if providers is not None else DEFAULT_PROVIDERS
        self.max_results = min(max_results, MAX_SERP_RESULTS)

    async def query_provider(self, provider: SearchProvider, keyword: str) -> list[RawResult]:
        result = await self.fetcher.fetch(provider.build_url(keyword))
        return provider.parse(HtmlDocument(result.body))

    async def fetch_serp(self, keyword: str) -> list[SerpEntry]:
        """Fetch up to ``max_results`` ranked results for a keyword.

        Args:
            keyword: Search query

        Returns:
            Entries ranked 1..N
        """
        keyword = keyword or ""
        for provider in self.providers:
            try:
                raw_results = await self.query_provider(provider, keyword)
            except PageAuditError as e:
                logger.info(f"SERP provider {provider.name} failed for {keyword!r}: {e.message}")
                continue

            if raw_results:
                logger.debug(f"SERP provider {provider.name} returned {len(raw_results)} results")
                return [
                    SerpEntry(rank=rank, title=title, link=link, snippet=snippet)
                    for rank, (title, link, snippet) in enumerate(
                        raw_results[:self.max_results], start=1
                    )
                ]
            logger.info(f"SERP provider {provider.name} returned no results for {keyword!r}")

        logger.warning(f"All SERP providers failed for {keyword!r}; using simulated results")
        return simulated_results(keyword, self.max_results)
