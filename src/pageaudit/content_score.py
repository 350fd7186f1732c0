"""Heuristic content scoring for a draft against a target keyword."""

from dataclasses import dataclass, field
from typing import Optional

from pageaudit.config import AuditThresholds, default_thresholds
from pageaudit.document import HtmlDocument
from pageaudit.keywords import keyword_density
from pageaudit.text_metrics import TextMetricsAnalyzer


@dataclass
class ContentScore:
    score: int
    words: int
    flesch: int
    density_percent: float
    keyword_count: int
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "words": self.words,
            "flesch": self.flesch,
            "density_percent": self.density_percent,
            "keyword_count": self.keyword_count,
            "suggestions": self.suggestions,
        }


class ContentScorer:
    """Scores content on length, readability and keyword usage.

    Up to ``length_weight`` points scale with word count toward
    ``target_content_words``; readability contributes its share of
    ``readability_weight``; keyword density inside the target band earns
    ``density_weight`` points, half that when present but outside the band
    and below the stuffing threshold.
    """

    def __init__(self, thresholds: Optional[AuditThresholds] = None):
        self.thresholds = thresholds or default_thresholds
        self.text_metrics = TextMetricsAnalyzer()

    @staticmethod
    def extract_text(html: Optional[str] = None, text: Optional[str] = None) -> str:
        """Plain text wins over HTML when both are supplied."""
        if text:
            return text
        if html:
            return HtmlDocument(html).visible_text()
        return ""

    def score(self, content: str, keyword: Optional[str] = None) -> ContentScore:
        t = self.thresholds
        metrics = self.text_metrics.analyze(content)
        keyword = (keyword or "").strip()
        keyword_count, density = keyword_density(content, keyword) if keyword else (0, 0.0)

        length_points = min(t.length_weight, t.length_weight * metrics.word_count / max(t.target_content_words, 1))
        readability_points = t.readability_weight * metrics.readability_score / 100
        if t.min_keyword_density <= density <= t.max_keyword_density:
            density_points = t.density_weight
        elif 0 < density < t.keyword_stuffing_threshold:
            density_points = t.density_weight / 2
        else:
            density_points = 0

        total = length_points + readability_points + density_points
        # Empty content has nothing to score
        if metrics.word_count == 0:
            total = 0

        return ContentScore(
            score=int(max(0, min(100, round(total)))),
            words=metrics.word_count,
            flesch=metrics.readability_score,
            density_percent=density,
            keyword_count=keyword_count,
            suggestions=self._suggestions(metrics.word_count, metrics.readability_score, keyword, keyword_count, density),
        )

    def _suggestions(
        self, words: int, flesch: int, keyword: str, keyword_count: int, density: float
    ) -> list[str]:
        t = self.thresholds
        suggestions = []
        if words < t.thin_content_words:
            suggestions.append(f"Increase content length to at least {t.thin_content_words} words")
        if flesch < t.min_readability_score:
            suggestions.append("Shorten sentences and use simpler words to improve readability")
        if not keyword:
            suggestions.append("Provide a target keyword to evaluate keyword usage")
        elif keyword_count == 0:
            suggestions.append(f"Add the keyword \"{keyword}\" to the content")
        elif density > t.keyword_stuffing_threshold:
            suggestions.append(f"Reduce use of \"{keyword}\" to avoid keyword stuffing")
        elif density < t.min_keyword_density:
            suggestions.append(f"Use \"{keyword}\" more often")
        return suggestions
