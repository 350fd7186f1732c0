"""HTTP retrieval shared by every audit component."""

import asyncio
import logging
import time
from typing import Optional

import httpx

from pageaudit.constants import (
    DEFAULT_USER_AGENT,
    GET_TIMEOUT_SECONDS,
    HEAD_TIMEOUT_SECONDS,
    HTTP_ERROR_STATUS,
    MAX_REDIRECTS,
)
from pageaudit.exceptions import HttpError, NetworkError
from pageaudit.models import FetchResult

logger = logging.getLogger(__name__)


class Fetcher:
    """Retrieves resources with a fixed user agent and a bounded redirect chain.

    Every call is a single attempt. Retrying, if wanted, is up to the caller.
    The underlying ``httpx.AsyncClient`` is created lazily unless one is
    passed in; a client created here is closed by ``aclose``.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: float = GET_TIMEOUT_SECONDS,
        probe_timeout: float = HEAD_TIMEOUT_SECONDS,
        max_redirects: int = MAX_REDIRECTS,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: User agent header (identifying bot UA if None)
            timeout: Timeout in seconds for full retrievals
            probe_timeout: Timeout in seconds for HEAD probes
            max_redirects: Redirect hops followed before giving up
            client: Shared client to use instead of creating one
            transport: Transport for a client created here (tests use MockTransport)
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.max_redirects = max_redirects
        self._transport = transport
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                    "Accept-Language": "en-US,en;q=0.9",
                },
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        raise_for_status: bool = True,
    ) -> FetchResult:
        """Retrieve a URL, following redirects up to the configured cap.

        Args:
            url: Absolute URL to retrieve
            method: HTTP method
            timeout: Per-call timeout in seconds (method default if None)
            max_redirects: Per-call redirect cap (fetcher default if None)
            raise_for_status: Raise HttpError for status >= 400

        Returns:
            FetchResult for the final response in the redirect chain

        Raises:
            NetworkError: Connection, DNS, timeout or redirect-limit failure
            HttpError: Error status while raise_for_status is set
        """
        method = method.upper()
        if timeout is None:
            timeout = self.probe_timeout if method == "HEAD" else self.timeout
        if max_redirects is None:
            max_redirects = self.max_redirects

        start_time = time.monotonic()
        try:
            request = self.client.build_request(
                method, url, headers={"User-Agent": self.user_agent}, timeout=timeout
            )
            # The timeout bounds the whole redirect chain, not each read
            response, hops = await asyncio.wait_for(
                self._send(request, url, max_redirects), timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise NetworkError(f"timeout of {timeout}s exceeded", url=url, timed_out=True) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(str(e) or type(e).__name__, url=url) from e

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(f"{method} {url} -> {response.status_code} in {elapsed_ms}ms ({hops} redirects)")

        if raise_for_status and response.status_code >= HTTP_ERROR_STATUS:
            raise HttpError(response.status_code, url=str(response.url))

        return FetchResult(
            final_url=str(response.url),
            status_code=response.status_code,
            headers={name.lower(): value for name, value in response.headers.items()},
            body=response.text if method != "HEAD" else "",
            elapsed_ms=elapsed_ms,
        )

    async def _send(self, request: httpx.Request, url: str, max_redirects: int) -> tuple[httpx.Response, int]:
        """Send a request, following redirects up to max_redirects hops."""
        hops = 0
        while True:
            response = await self.client.send(request, follow_redirects=False)
            if not response.is_redirect or response.next_request is None:
                return response, hops
            if hops >= max_redirects:
                raise NetworkError(
                    f"Maximum number of redirects ({max_redirects}) exceeded", url=url
                )
            hops += 1
            request = response.next_request

    async def head(self, url: str, raise_for_status: bool = True) -> FetchResult:
        """Lightweight existence check using the probe timeout."""
        return await self.fetch(url, method="HEAD", raise_for_status=raise_for_status)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
