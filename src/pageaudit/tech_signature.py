"""Technology signature detection from markup and response headers.

A small pattern table covering the platforms most often asked about in an
audit: CMS, frontend frameworks, CSS frameworks and tag managers.
"""

import logging
import re
from typing import Optional

from pageaudit.document import HtmlDocument
from pageaudit.models import FetchResult

logger = logging.getLogger(__name__)


# Technology -> patterns searched in raw markup
SIGNATURES = {
    'WordPress': [r'wp-content', r'wp-includes', r'/wp-json/'],
    'Shopify': [r'cdn\.shopify\.com', r'Shopify\.theme'],
    'Drupal': [r'sites/default/files', r'Drupal\.settings'],
    'Joomla': [r'/media/jui/', r'joomla'],
    'React': [r'react-dom', r'data-reactroot', r'__react'],
    'Next.js': [r'_next/static', r'__NEXT_DATA__'],
    'Vue.js': [r'vue(?:\.min)?\.js', r'data-v-[0-9a-f]{6,}', r'__vue'],
    'Nuxt.js': [r'__NUXT__', r'/_nuxt/'],
    'Angular': [r'ng-version', r'ng-app', r'angular(?:\.min)?\.js'],
    'Svelte': [r'svelte-[a-z0-9]{5,}'],
    'jQuery': [r'jquery(?:[.-]\d+(?:\.\d+)*)?(?:\.min)?\.js'],
    'Bootstrap': [r'bootstrap(?:\.min)?\.(?:css|js)'],
    'Tailwind CSS': [r'tailwind'],
    'Google Analytics': [r'google-analytics\.com', r'gtag\(', r'analytics\.js'],
    'Google Tag Manager': [r'googletagmanager\.com', r'gtm\.js'],
}


class TechnologyDetector:
    """Detects CMS, frameworks and hosting for a fetched page."""

    def __init__(self, signatures: Optional[dict[str, list[str]]] = None):
        self.signatures = {
            tech: [re.compile(p, re.IGNORECASE) for p in patterns]
            for tech, patterns in (signatures or SIGNATURES).items()
        }

    def detect_frameworks(self, markup: str) -> list[str]:
        """Technologies whose signature appears in the markup, in table order."""
        detected = []
        for tech, patterns in self.signatures.items():
            for pattern in patterns:
                match = pattern.search(markup)
                if match:
                    logger.debug(f"Detected {tech} via {match.group(0)!r}")
                    detected.append(tech)
                    break
        return detected

    def detect(self, document: HtmlDocument, fetch_result: FetchResult) -> dict:
        """Summarize the page's technology stack.

        Args:
            document: Parsed page
            fetch_result: Response the page came from (for headers)

        Returns:
            Dictionary with cms, frameworks and hosting keys
        """
        return {
            'cms': document.meta_content('generator') or 'Unknown',
            'frameworks': self.detect_frameworks(document.markup),
            'hosting': fetch_result.header('server'),
        }
