"""Keyword frequency extraction."""

import re
from collections import Counter
from typing import Optional

from pageaudit.constants import MIN_KEYWORD_LENGTH, TOP_KEYWORDS_COUNT
from pageaudit.models import KeywordEntry

# Unicode-aware: accented letters are kept
_NON_ALNUM = re.compile(r'[\W_]')


def normalize_tokens(text: str, min_length: int = MIN_KEYWORD_LENGTH) -> list[str]:
    """Lowercase, strip non-alphanumerics per token, drop short tokens."""
    tokens = (_NON_ALNUM.sub('', raw) for raw in (text or "").lower().split())
    return [t for t in tokens if len(t) >= max(min_length, 1)]


class KeywordExtractor:
    """Builds a frequency table over normalized tokens."""

    def __init__(self, min_length: int = MIN_KEYWORD_LENGTH, top_n: int = TOP_KEYWORDS_COUNT):
        self.min_length = min_length
        self.top_n = top_n

    def extract(self, text: str, top_n: Optional[int] = None) -> list[KeywordEntry]:
        """Return the most frequent terms.

        Ties keep first-occurrence order (Counter preserves insertion order
        and most_common sorts stably).
        """
        counts = Counter(normalize_tokens(text, self.min_length))
        limit = self.top_n if top_n is None else top_n
        return [KeywordEntry(term, freq) for term, freq in counts.most_common(limit)]


def extract_keywords(
    text: str, top_n: int = TOP_KEYWORDS_COUNT, min_length: int = MIN_KEYWORD_LENGTH
) -> list[tuple[str, int]]:
    """Convenience wrapper returning (term, frequency) pairs."""
    return [entry.as_pair() for entry in KeywordExtractor(min_length, top_n).extract(text)]


def keyword_density(text: str, keyword: str) -> tuple[int, float]:
    """Count whole-phrase occurrences of a keyword and its density.

    Density is the share of words covered by the phrase, as a percentage.

    Returns:
        Tuple of (occurrences, density_percent)
    """
    phrase = [_NON_ALNUM.sub('', w) for w in (keyword or "").lower().split()]
    phrase = [w for w in phrase if w]
    words = [_NON_ALNUM.sub('', w) for w in (text or "").lower().split()]
    if not phrase or not words:
        return 0, 0.0

    size = len(phrase)
    occurrences = sum(
        1 for i in range(len(words) - size + 1) if words[i:i + size] == phrase
    )
    density = round(occurrences * size / len(words) * 100, 2)
    return occurrences, density
