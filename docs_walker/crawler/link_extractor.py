# docs_walker/crawler/link_extractor.py
"""
Link extraction utilities for DocsWalker.
"""
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = ("LITERAL_URL_MARKERS", "parse_document", "extract_links", "find_link_in_code")

LITERAL_URL_MARKERS = ("http://", "https://")


def parse_document(body: str) -> BeautifulSoup:
    return BeautifulSoup(body, "html.parser")


def extract_links(document: BeautifulSoup) -> List[str]:
    """
    Return the raw ``href`` values of all ``<a>`` elements, in document order.

    Elements without an ``href`` attribute are skipped. The parser has already
    decoded character references in the values, so ``&amp;`` arrives as ``&``;
    resolving and filtering them is up to the normalizer.
    """
    links: List[str] = []
    for tag in document.find_all("a"):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str):
            links.append(href)
    return links


def find_link_in_code(document: BeautifulSoup) -> Optional[Tag]:
    """Return the first ``<code>`` element whose markup contains a literal URL."""
    for tag in document.find_all("code"):
        if not isinstance(tag, Tag):
            continue
        inner = tag.decode_contents()
        if any(marker in inner for marker in LITERAL_URL_MARKERS):
            return tag
    return None
