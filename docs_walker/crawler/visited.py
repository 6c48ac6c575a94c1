# docs_walker/crawler/visited.py
"""
Visit record: every URL ever discovered, with the pages that linked to it.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple

if TYPE_CHECKING:
    from docs_walker.crawler.models import CrawlTarget

__all__ = ("VisitRecord",)


class VisitRecord:
    """
    Multi-map ``CrawlTarget -> [source page, ...]``.

    Sources keep their insertion order, and nothing is ever evicted: the
    history is what failure reports quote. All mutations go through one lock,
    so :meth:`record_if_first` is linearizable for threaded callers as well as
    for tasks on a single event loop.
    """

    def __init__(self) -> None:
        self._sources: Dict["CrawlTarget", List[str]] = {}
        self._lock = threading.Lock()

    def record_if_first(self, target: "CrawlTarget", source: str) -> bool:
        """Append *source* to *target*'s list; True iff this call created the entry."""
        with self._lock:
            sources = self._sources.get(target)
            if sources is None:
                self._sources[target] = [source]
                return True
            sources.append(source)
            return False

    def add_seed(self, target: "CrawlTarget") -> bool:
        """Register a walk entry point, which has no linking page."""
        with self._lock:
            if target in self._sources:
                return False
            self._sources[target] = []
            return True

    def sources(self, target: "CrawlTarget") -> List[str]:
        with self._lock:
            return list(self._sources.get(target, ()))

    def items(self) -> List[Tuple["CrawlTarget", List[str]]]:
        with self._lock:
            return [(target, list(sources)) for target, sources in self._sources.items()]

    def __contains__(self, target: object) -> bool:
        with self._lock:
            return target in self._sources

    def __len__(self) -> int:
        with self._lock:
            return len(self._sources)

    def __iter__(self) -> Iterator["CrawlTarget"]:
        return iter([target for target, _ in self.items()])
