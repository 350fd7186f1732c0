"""Word, sentence and syllable counts plus a Flesch-style readability score.

All figures are heuristic approximations. Syllables follow a fixed rule
rather than pronunciation, and only the first ``SYLLABLE_WORD_CAP`` words are
syllable-counted, so very long documents report a lower syllables-per-word
ratio (and a higher score) than a full count would give.
"""

import math
import re

from pageaudit.constants import (
    GRADE_MAPPING,
    SYLLABLE_WORD_CAP,
    WORDS_PER_MINUTE,
)
from pageaudit.models import TextMetrics

_SENTENCE_BREAK = re.compile(r'[.!?]+')
_SILENT_SUFFIX = re.compile(r'(?:[^laeiouy]es|ed|[^laeiouy]e)$')
_VOWEL_GROUP = re.compile(r'[aeiouy]{1,2}')


def split_sentences(text: str) -> list[str]:
    """Split on runs of sentence punctuation, dropping empty fragments."""
    return [s.strip() for s in _SENTENCE_BREAK.split(text or "") if s.strip()]


def split_words(text: str) -> list[str]:
    return (text or "").split()


def count_syllables(word: str) -> int:
    """Estimate syllables in a word.

    Words of three letters or fewer count as one. Longer words lose a
    trailing silent-e/-es/-ed, then each group of one or two vowels counts
    once. A word with no vowel groups still counts as one.
    """
    word = (word or "").lower()
    if not word:
        return 0
    if len(word) <= 3:
        return 1
    cleaned = _SILENT_SUFFIX.sub('', word)
    groups = _VOWEL_GROUP.findall(cleaned)
    return len(groups) if groups else 1


def readability_score(word_count: int, sentence_count: int, syllable_count: int) -> int:
    """Flesch Reading Ease rounded and clamped to [0, 100]."""
    words = max(word_count, 1)
    sentences = max(sentence_count, 1)
    score = 206.835 - 1.015 * (words / sentences) - 84.6 * (max(syllable_count, 0) / words)
    return int(max(0, min(100, round(score))))


def readability_grade(score: float) -> str:
    """Map a readability score to its grade band."""
    for (low, high), grade in GRADE_MAPPING.items():
        if low <= score <= high:
            return grade
    # Scores between bands (e.g. 89.5) fall to the lower band
    for (low, _high), grade in GRADE_MAPPING.items():
        if score >= low:
            return grade
    return "Graduate"


def read_time_minutes(word_count: int) -> int:
    return math.ceil(max(word_count, 0) / WORDS_PER_MINUTE)


class TextMetricsAnalyzer:
    """Computes TextMetrics for a block of text."""

    def __init__(self, syllable_word_cap: int = SYLLABLE_WORD_CAP):
        self.syllable_word_cap = syllable_word_cap

    def analyze(self, text: str) -> TextMetrics:
        """Analyze text that already has non-content markup removed.

        Args:
            text: Visible document text

        Returns:
            TextMetrics for the text
        """
        words = split_words(text)
        sentences = split_sentences(text)
        syllables = sum(count_syllables(w) for w in words[:self.syllable_word_cap])

        return TextMetrics(
            word_count=len(words),
            sentence_count=len(sentences),
            syllable_count=syllables,
            readability_score=readability_score(len(words), len(sentences), syllables),
            estimated_read_minutes=read_time_minutes(len(words)),
        )
