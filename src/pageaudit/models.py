"""Data models for the page audit pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class FetchResult:
    """A retrieved resource. Headers are keyed by lowercase name."""

    final_url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    elapsed_ms: int = 0

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


class LinkClassification(str, Enum):
    """Whether a link stays on the audited origin."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class Reachability(str, Enum):
    """Outcome of a link probe."""
    OK = "ok"
    BROKEN = "broken"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ProbeOutcome:
    """Reachability plus the detail that explains a broken result."""

    kind: Reachability = Reachability.UNKNOWN
    status_code: Optional[int] = None
    timed_out: bool = False

    @classmethod
    def ok(cls, status_code: int) -> "ProbeOutcome":
        return cls(Reachability.OK, status_code=status_code)

    @classmethod
    def broken_status(cls, status_code: int) -> "ProbeOutcome":
        return cls(Reachability.BROKEN, status_code=status_code)

    @classmethod
    def broken_timeout(cls) -> "ProbeOutcome":
        return cls(Reachability.BROKEN, timed_out=True)

    @property
    def is_broken(self) -> bool:
        return self.kind is Reachability.BROKEN

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"reachability": self.kind.value}
        if self.status_code is not None:
            data["status_code"] = self.status_code
        if self.timed_out:
            data["timeout"] = True
        return data


@dataclass
class LinkRecord:
    """One outbound reference discovered on a page."""

    raw_reference: str
    resolved_url: str
    classification: LinkClassification
    reachability: ProbeOutcome = field(default_factory=ProbeOutcome)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference": self.raw_reference,
            "url": self.resolved_url,
            "classification": self.classification.value,
            **self.reachability.to_dict(),
        }


@dataclass(frozen=True)
class TextMetrics:
    """Counts and readability derived from document text."""

    word_count: int = 0
    sentence_count: int = 0
    syllable_count: int = 0
    readability_score: int = 100
    estimated_read_minutes: int = 0


@dataclass(frozen=True)
class KeywordEntry:
    """A term and how often it occurs."""

    term: str
    frequency: int

    def as_pair(self) -> tuple[str, int]:
        return (self.term, self.frequency)


@dataclass(frozen=True)
class SerpEntry:
    """One organic search result."""

    rank: int
    title: str
    link: str
    snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.rank,
            "title": self.title,
            "link": self.link,
            "snippet": self.snippet,
        }


@dataclass
class AuditReport:
    """Composite result of a full audit.

    Each section holds either a check's payload or a failure marker. When the
    target document itself could not be fetched, ``error`` is set and
    ``sections`` is empty.
    """

    url: str
    sections: dict[str, dict[str, Any]] = field(default_factory=dict)
    error: Optional[str] = None
    details: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def failed_checks(self) -> list[str]:
        return [name for name, payload in self.sections.items() if "error" in payload]

    def to_dict(self) -> dict[str, Any]:
        if self.failed:
            return {"error": self.error, "details": self.details, "status": "error"}
        return {**self.sections, "status": "success"}
