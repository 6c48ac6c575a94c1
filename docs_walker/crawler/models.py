# docs_walker/crawler/models.py
"""
Data models for the DocsWalker crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from docs_walker.crawler.scope import CrawlScope
from docs_walker.crawler.visited import VisitRecord

__all__ = (
    "CrawlTarget",
    "PROBE",
    "WorkItem",
    "Success",
    "HttpFailure",
    "TransportFailure",
    "OutOfScope",
    "FetchOutcome",
    "FailureRecord",
    "CodeLinkSighting",
    "WalkResult",
)


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """Normalized absolute URL (scheme, authority, path and query, no fragment)."""

    url: str

    def __str__(self) -> str:
        return self.url


class _Probe:
    """Sentinel work item used only to detect quiescence."""

    def __repr__(self) -> str:
        return "PROBE"


PROBE = _Probe()

WorkItem = Union[CrawlTarget, _Probe]


@dataclass(frozen=True, slots=True)
class Success:
    final_url: str
    body: str


@dataclass(frozen=True, slots=True)
class HttpFailure:
    status: int

    def describe(self) -> str:
        return f"HTTP {self.status}"


@dataclass(frozen=True, slots=True)
class TransportFailure:
    cause: str

    def describe(self) -> str:
        return self.cause


@dataclass(frozen=True, slots=True)
class OutOfScope:
    """The transport's redirects led outside the base prefix."""

    final_url: str


FetchOutcome = Union[Success, HttpFailure, TransportFailure, OutOfScope]


@dataclass(slots=True)
class FailureRecord:
    """A fetch that failed, with the pages that linked to it."""

    url: str
    reason: str
    sources: List[str] = field(default_factory=list)


@dataclass(slots=True)
class CodeLinkSighting:
    """A literal URL found inside a <code> element."""

    page: str
    markup: str


@dataclass(slots=True)
class WalkResult:
    """Everything one walk produced: visit history, fetched pages, failures."""

    scope: CrawlScope
    seed: CrawlTarget
    visited: VisitRecord
    pages: List[str] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)
    code_links: List[CodeLinkSighting] = field(default_factory=list)
    elapsed: float = 0.0
