# docs_walker/crawler/scope.py
"""
Crawl scope: the base prefix that defines "inside the walk" and an optional
ignored prefix whose links are not followed.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from docs_walker.crawler.models import CrawlTarget

__all__ = ("CrawlScope", "FETCHABLE_SCHEMES")

FETCHABLE_SCHEMES = frozenset(("http", "https"))


@dataclass(frozen=True, slots=True)
class CrawlScope:
    """
    Prefix pair deciding what a walk follows.

    The base prefix always wins: a URL under both prefixes is inside the scope.
    """

    base_url: str
    ignored_url: Optional[str] = None

    def in_base(self, url: Union[str, "CrawlTarget"]) -> bool:
        return str(url).startswith(self.base_url)

    def is_ignored(self, url: Union[str, "CrawlTarget"]) -> bool:
        text = str(url)
        return (
            self.ignored_url is not None
            and text.startswith(self.ignored_url)
            and not text.startswith(self.base_url)
        )

    def admits(self, target: Union[str, "CrawlTarget"]) -> bool:
        """
        Return True if *target* is a candidate for the walk.

        Candidates outside the base prefix are still recorded as seen by the
        walker, they are just never fetched.
        """
        text = str(target)
        if urlsplit(text).scheme.lower() not in FETCHABLE_SCHEMES:
            return False
        if self.is_ignored(text):
            return False
        return True
