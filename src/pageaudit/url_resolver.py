"""Normalization and origin classification of page references."""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional
from urllib.parse import urljoin, urlsplit

from pageaudit.constants import REJECTED_REFERENCE_PREFIXES
from pageaudit.exceptions import RejectedReference
from pageaudit.models import LinkClassification

logger = logging.getLogger(__name__)

_ABSOLUTE_HTTP = re.compile(r'^https?://', re.IGNORECASE)
_HAS_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def origin_of(url: str) -> Optional[str]:
    """Return ``scheme://host[:port]`` in lowercase, or None for non-http URLs."""
    try:
        parts = urlsplit(url)
        # Accessing port validates it
        parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def resolve_reference(reference: str, base_url: str) -> str:
    """Resolve a page reference to an absolute http(s) URL.

    Args:
        reference: Raw attribute value (href/src)
        base_url: URL of the page the reference appears on

    Returns:
        Absolute URL

    Raises:
        RejectedReference: The reference does not name a fetchable resource
    """
    ref = (reference or "").strip()
    if not ref:
        raise RejectedReference(reference, "empty reference")
    if ref.startswith("#"):
        raise RejectedReference(reference, "fragment-only reference")
    if ref.lower().startswith(REJECTED_REFERENCE_PREFIXES):
        raise RejectedReference(reference, "not a real resource")

    if ref.startswith("//"):
        resolved = "http://" + ref[2:]
    elif _ABSOLUTE_HTTP.match(ref):
        resolved = ref
    elif _HAS_SCHEME.match(ref):
        raise RejectedReference(reference, "unsupported scheme")
    else:
        base_origin = origin_of(base_url)
        if base_origin is None:
            raise RejectedReference(reference, f"base URL {base_url!r} is not absolute")
        if ref.startswith("/"):
            resolved = base_origin + ref
        else:
            try:
                resolved = urljoin(base_url, ref)
            except ValueError as e:
                raise RejectedReference(reference, str(e)) from e

    if origin_of(resolved) is None:
        raise RejectedReference(reference, "malformed URL")
    return resolved


def classify(resolved_url: str, base_url: str) -> LinkClassification:
    """Internal iff the resolved URL shares the base URL's origin."""
    base_origin = origin_of(base_url)
    if base_origin is not None and origin_of(resolved_url) == base_origin:
        return LinkClassification.INTERNAL
    return LinkClassification.EXTERNAL


@dataclass(frozen=True)
class ResolvedReference:
    raw_reference: str
    resolved_url: str
    classification: LinkClassification


class URLResolver:
    """Resolves and classifies references found on a single page."""

    def __init__(self, base_url: str):
        self.base_url = base_url

    def resolve(self, reference: str) -> Optional[ResolvedReference]:
        """Resolve one reference; rejected ones come back as None."""
        try:
            resolved = resolve_reference(reference, self.base_url)
        except RejectedReference as e:
            logger.debug(e.message)
            return None
        return ResolvedReference(
            raw_reference=reference,
            resolved_url=resolved,
            classification=classify(resolved, self.base_url),
        )

    def resolve_all(self, references: Iterable[str]) -> list[ResolvedReference]:
        """Resolve references, dropping rejections and duplicate URLs.

        First-seen order is preserved.
        """
        seen: set[str] = set()
        resolved_refs = []
        for reference in references:
            resolved = self.resolve(reference)
            if resolved is None or resolved.resolved_url in seen:
                continue
            seen.add(resolved.resolved_url)
            resolved_refs.append(resolved)
        return resolved_refs
