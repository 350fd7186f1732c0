"""Page audit pipeline: fetch, analyze and probe web pages."""

__version__ = "0.1.0"

from pageaudit.fetcher import Fetcher
from pageaudit.url_resolver import URLResolver, resolve_reference, classify
from pageaudit.document import HtmlDocument
from pageaudit.text_metrics import TextMetricsAnalyzer, count_syllables, readability_score
from pageaudit.keywords import KeywordExtractor, extract_keywords
from pageaudit.link_prober import LinkHealthProber
from pageaudit.serp import SerpResolver
from pageaudit.suggestions import KeywordSuggester
from pageaudit.content_score import ContentScorer
from pageaudit.orchestrator import AuditOrchestrator
from pageaudit.concurrency import settle_all, Settled
from pageaudit.store import KeyedStore, ProjectStore
from pageaudit.models import (
    FetchResult,
    LinkRecord,
    ProbeOutcome,
    Reachability,
    LinkClassification,
    TextMetrics,
    KeywordEntry,
    SerpEntry,
    AuditReport,
)
from pageaudit.exceptions import (
    PageAuditError,
    MissingParameter,
    NetworkError,
    HttpError,
    ParseError,
    RejectedReference,
)
from pageaudit.config import Config, AuditThresholds, settings

__all__ = [
    # Core
    "Fetcher",
    "URLResolver",
    "resolve_reference",
    "classify",
    "HtmlDocument",
    "TextMetricsAnalyzer",
    "count_syllables",
    "readability_score",
    "KeywordExtractor",
    "extract_keywords",
    "LinkHealthProber",
    "SerpResolver",
    "KeywordSuggester",
    "ContentScorer",
    "AuditOrchestrator",
    "settle_all",
    "Settled",
    "KeyedStore",
    "ProjectStore",
    # Models
    "FetchResult",
    "LinkRecord",
    "ProbeOutcome",
    "Reachability",
    "LinkClassification",
    "TextMetrics",
    "KeywordEntry",
    "SerpEntry",
    "AuditReport",
    # Errors
    "PageAuditError",
    "MissingParameter",
    "NetworkError",
    "HttpError",
    "ParseError",
    "RejectedReference",
    # Config
    "Config",
    "AuditThresholds",
    "settings",
]
