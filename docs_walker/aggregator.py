# File: docs_walker/aggregator.py
"""docs_walker.aggregator: Merging walk results into a serialisable report."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, TypedDict


class ScopeInfo(TypedDict, total=False):
    """Summary of one walked scope."""

    base_url: str
    ignored_url: str | None
    seed: str
    pages: int
    failures: int
    seen: int
    elapsed: float


class FailureInfo(TypedDict, total=False):
    """A failed fetch and the pages that linked to it."""

    url: str
    reason: str
    sources: List[str]


class CodeLinkInfo(TypedDict, total=False):
    """A literal URL found inside a <code> element."""

    page: str
    markup: str


@dataclass(slots=True)
class WalkReport:
    """Results of one or more walks: scopes, fetched pages, failures."""

    scopes: List[ScopeInfo] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)
    code_links: List[CodeLinkInfo] = field(default_factory=list)

    raw_results: List[Any] | None = None

    def as_dict(self) -> Dict[str, Any]:
        # raw_results hold live WalkResult objects and are never serialised
        return {
            "scopes": list(self.scopes),
            "pages": list(self.pages),
            "failures": list(self.failures),
            "code_links": list(self.code_links),
        }

    def json(self, *, pretty: bool = False) -> str:
        """Return the JSON form of the report without the raw results."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _scope_info(result: Any) -> ScopeInfo:
    return {
        "base_url": result.scope.base_url,
        "ignored_url": result.scope.ignored_url,
        "seed": str(result.seed),
        "pages": len(result.pages),
        "failures": len(result.failures),
        "seen": len(result.visited),
        "elapsed": round(result.elapsed, 3),
    }


def aggregate_results(raw_results: Sequence[Any]) -> WalkReport:
    """Collect every part of the report from WalkResult objects."""
    report = WalkReport(raw_results=list(raw_results))
    seen_pages: set[str] = set()
    for result in raw_results:
        report.scopes.append(_scope_info(result))
        for page in result.pages:
            if page not in seen_pages:
                seen_pages.add(page)
                report.pages.append(page)
        report.failures.extend(
            {"url": f.url, "reason": f.reason, "sources": list(f.sources)} for f in result.failures
        )
        report.code_links.extend(
            {"page": c.page, "markup": c.markup} for c in result.code_links
        )
    return report
