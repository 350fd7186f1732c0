# src/pageaudit/constants.py
"""Centralized constants for the page audit pipeline.

This module contains magic numbers and fixed values that are used across
multiple modules. For user-configurable values, see config.py, Config and
AuditThresholds.
"""

# =============================================================================
# Fetcher Constants
# =============================================================================

# Identifying user agent sent with every request
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) SEO-Analyzer-Bot/1.0"

# Timeout for full document retrieval (seconds)
GET_TIMEOUT_SECONDS = 10.0

# Timeout for lightweight existence probes (seconds)
HEAD_TIMEOUT_SECONDS = 8.0

# Maximum redirect hops followed per request
MAX_REDIRECTS = 5

# Status codes at or above this are treated as errors
HTTP_ERROR_STATUS = 400


# =============================================================================
# Link Prober Constants
# =============================================================================

# Ceiling on probed URLs per page
MAX_PROBE_LINKS = 30

# Attributes inspected for outbound references, in discovery order
REFERENCE_SOURCES = (
    ("a", "href"),
    ("img", "src"),
    ("link", "href"),
    ("script", "src"),
)

# Reference prefixes that never name a fetchable resource
REJECTED_REFERENCE_PREFIXES = ("data:", "javascript:")


# =============================================================================
# Text Metrics Constants
# =============================================================================

# Tags whose text never counts as body content
EXCLUDED_TEXT_TAGS = ("script", "style", "nav", "footer", "noscript")

# Only the first N words are syllable-counted
SYLLABLE_WORD_CAP = 500

# Reading speed used for read time estimates
WORDS_PER_MINUTE = 200

# Grade level mapping for Flesch scores
GRADE_MAPPING = {
    (90, 100): "5th Grade",
    (80, 89): "6th Grade",
    (70, 79): "7th Grade",
    (60, 69): "8th-9th Grade",
    (50, 59): "10th-12th Grade",
    (30, 49): "College",
    (0, 29): "Graduate",
}


# =============================================================================
# Keyword Constants
# =============================================================================

# Tokens shorter than this are not keywords
MIN_KEYWORD_LENGTH = 4

# Number of top keywords reported by the audit
TOP_KEYWORDS_COUNT = 10


# =============================================================================
# SERP Constants
# =============================================================================

# Maximum entries returned per query
MAX_SERP_RESULTS = 10

BING_SEARCH_URL = "https://www.bing.com/search"
DUCKDUCKGO_SEARCH_URL = "https://html.duckduckgo.com/html"
GOOGLE_SUGGEST_URL = "http://suggestqueries.google.com/complete/search"

SIMULATED_RESULT_LINK = "https://example.com/{slug}/{rank}"
SIMULATED_RESULT_SNIPPET = (
    "This is a simulated search result description for {keyword}. "
    "Real scraping blocked."
)

# Modifiers used when suggestions have to be generated locally
SUGGESTION_MODIFIERS = ["best", "top", "cheap", "buy", "how to", "vs", "guide", "2025", "free"]
QUESTION_MODIFIERS = ["how to", "what is", "why", "can", "best"]

MAX_QUESTIONS = 20
DEFAULT_SUGGESTION_COUNT = 20


# =============================================================================
# Report Constants
# =============================================================================

# Sample limits for list-valued check payloads
MISSING_ALT_SAMPLE_LIMIT = 10
LINK_SAMPLE_LIMIT = 20
SITEMAP_URL_LIMIT = 20

# Meta tags every page is expected to carry
COMMON_META_TAGS = ["description", "keywords", "viewport", "og:title"]
