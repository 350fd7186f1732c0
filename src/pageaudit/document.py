"""Typed read-only accessors over a parsed HTML document."""

import re
from typing import Iterator, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag, Comment, Doctype, ProcessingInstruction

from pageaudit.constants import EXCLUDED_TEXT_TAGS, REFERENCE_SOURCES

_WHITESPACE = re.compile(r'\s+')
_SKIPPED_STRINGS = (Comment, Doctype, ProcessingInstruction)


class HtmlDocument:
    """A parsed page that checks can share.

    Nothing here mutates the parse tree, so one instance can be read by many
    checks running concurrently.
    """

    def __init__(self, markup: str):
        self.markup = markup or ""
        self.soup = BeautifulSoup(self.markup, "html.parser")

    # Element accessors

    def elements(self, tag: str, **attrs) -> list[Tag]:
        return self.soup.find_all(tag, attrs=attrs) if attrs else self.soup.find_all(tag)

    def first(self, tag: str, **attrs) -> Optional[Tag]:
        return self.soup.find(tag, attrs=attrs) if attrs else self.soup.find(tag)

    def by_class(self, css_class: str, tag: Optional[str] = None) -> list[Tag]:
        """Elements carrying a class, optionally restricted to one tag."""
        return self.soup.find_all(tag, class_=css_class)

    @staticmethod
    def attribute(element: Optional[Tag], name: str) -> Optional[str]:
        """Attribute value as a string; multi-valued attributes are joined."""
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    @staticmethod
    def text_of(element: Optional[Tag], strip: bool = True) -> str:
        if element is None:
            return ""
        return element.get_text(strip=strip)

    def texts(self, tag: str) -> list[str]:
        return [self.text_of(el) for el in self.elements(tag)]

    # Page-level accessors

    @property
    def title(self) -> Optional[str]:
        return self.text_of(self.first("title")) or None

    def meta_content(self, name: str) -> Optional[str]:
        """Content of ``meta[name=...]`` (case-insensitive name match)."""
        wanted = name.lower()
        for meta in self.elements("meta"):
            meta_name = self.attribute(meta, "name")
            if meta_name and meta_name.lower() == wanted:
                return self.attribute(meta, "content")
        return None

    def meta_tags(self) -> dict[str, Optional[str]]:
        """Every meta name/property mapped to its content; later tags win."""
        metas: dict[str, Optional[str]] = {}
        for meta in self.elements("meta"):
            key = self.attribute(meta, "name") or self.attribute(meta, "property")
            if key:
                metas[key] = self.attribute(meta, "content")
        return metas

    def headings(self) -> dict[str, list[str]]:
        return {f"h{level}": self.texts(f"h{level}") for level in range(1, 7)}

    def references(self) -> Iterator[str]:
        """Raw href/src values of links, images, stylesheets and scripts in document order."""
        wanted = {tag: attr for tag, attr in REFERENCE_SOURCES}
        for element in self.soup.find_all(list(wanted)):
            value = self.attribute(element, wanted[element.name])
            if value:
                yield value

    def anchor_hrefs(self) -> list[str]:
        return [
            href for href in (self.attribute(a, "href") for a in self.elements("a"))
            if href
        ]

    def visible_text(self, excluded_tags=EXCLUDED_TEXT_TAGS) -> str:
        """Body text with excluded subtrees skipped and whitespace collapsed.

        Text nodes are concatenated as-is, so inline markup never splits a word.
        """
        root = self.soup.body or self.soup
        excluded = set(excluded_tags)
        parts = []
        for string in root.find_all(string=True):
            if isinstance(string, _SKIPPED_STRINGS) or not isinstance(string, NavigableString):
                continue
            if any(parent.name in excluded for parent in string.parents):
                continue
            parts.append(str(string))
        return _WHITESPACE.sub(" ", "".join(parts)).strip()
