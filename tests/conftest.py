# tests/conftest.py
"""Shared fixtures: fetchers backed by httpx.MockTransport."""

import httpx
import pytest

from pageaudit.fetcher import Fetcher


PAGE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Garden Guide</title>
  <meta name="description" content="Growing tomatoes at home">
  <meta name="generator" content="WordPress 6.4">
  <link rel="stylesheet" href="/wp-content/themes/site/style.css">
  <script src="https://cdn.example.net/jquery-3.7.1.min.js"></script>
  <style>.hidden { display: none; }</style>
</head>
<body>
  <nav><a href="/">Home</a> navigation menu</nav>
  <h1>Growing Tomatoes</h1>
  <h2>Soil</h2>
  <p>Tomatoes need warm soil. Plant tomatoes after the frost!</p>
  <p>Water tomatoes deeply and often.</p>
  <a href="/guide">Guide</a>
  <a href="https://other.example.org/seeds">Seeds</a>
  <a href="#top">Top</a>
  <a href="mailto:hello@example.com">Mail</a>
  <img src="/images/tomato.jpg" alt="">
  <img src="/images/soil.jpg" alt="Dark soil">
  <script>var tracking = "ignored words here";</script>
  <footer>footer text</footer>
</body>
</html>
"""


def make_fetcher(handler, **kwargs) -> Fetcher:
    """Build a Fetcher whose requests are answered by ``handler``."""
    return Fetcher(transport=httpx.MockTransport(handler), **kwargs)


@pytest.fixture
def page_html():
    """Sample page markup."""
    return PAGE_HTML


@pytest.fixture
def site_handler():
    """Serve the sample page, a working guide page and a broken seeds link."""
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == "https://example.com/":
            return httpx.Response(200, html=PAGE_HTML, headers={"Server": "nginx"})
        if url == "https://other.example.org/seeds":
            return httpx.Response(404)
        if url.startswith("https://example.com/") or url.startswith("https://cdn.example.net/"):
            return httpx.Response(200, text="ok")
        return httpx.Response(404)
    return handler
