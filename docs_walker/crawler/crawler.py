# === FILE: docs_walker/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from aiohttp import ClientSession, ClientTimeout

from docs_walker.crawler.fetcher import Fetcher
from docs_walker.crawler.link_extractor import extract_links, find_link_in_code, parse_document
from docs_walker.crawler.models import (
    PROBE,
    CodeLinkSighting,
    CrawlTarget,
    FailureRecord,
    HttpFailure,
    OutOfScope,
    Success,
    TransportFailure,
    WalkResult,
    WorkItem,
)
from docs_walker.crawler.normalizer import normalize_link
from docs_walker.crawler.scope import CrawlScope
from docs_walker.crawler.visited import VisitRecord

__all__ = ("AsyncWalker",)

#: pending output of a probe that found the walk quiescent
_FINISHED = None


class AsyncWalker:
    """
    Self-feeding crawler with a fixed pool of workers and probe-token termination.

    The queue starts as ``[seed, PROBE]``. A worker dequeuing a real target
    clears ``awaiting_second_probe``. A worker dequeuing the probe sets the
    flag and puts the probe back, or, when the flag is already set (the probe
    made a full lap with no real target dequeued in between), ends the walk.

    Outputs of dequeued items are committed to the queue in dequeue order,
    so a probe can never overtake links that an earlier, still in-flight page
    is about to produce.

    The bookkeeping methods (``_on_dequeue``, ``_admit``, ``_commit``) never
    await: they are the critical section and run exclusively on the event
    loop. Only the fetch itself is awaited.
    """

    def __init__(self, config, scope: Optional[CrawlScope] = None) -> None:
        self.config = config
        self.scope: CrawlScope = scope or config.scope()
        self.concurrency: int = config.concurrency
        self.max_reported_sources: int = config.max_reported_sources
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("DocsWalker")
        self._reset()

    def _reset(self) -> None:
        self.visited = VisitRecord()
        self.pages: List[str] = []
        self.failures: List[FailureRecord] = []
        self.code_links: List[CodeLinkSighting] = []
        self._queue: asyncio.Queue[WorkItem] = asyncio.Queue()
        self._awaiting_second_probe = False
        self._next_seq = 0
        self._next_commit = 0
        self._pending: Dict[int, Optional[Sequence[WorkItem]]] = {}
        self._done = asyncio.Event()

    async def __aenter__(self) -> AsyncWalker:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def walk(self, seed: Optional[CrawlTarget] = None) -> WalkResult:
        """Walk from *seed* (default: the configured seed) until the queue is quiescent."""
        if not self.session:
            raise RuntimeError("Session not initialized")
        seed = seed or self.config.seed()
        self._reset()
        self.logger.info("Walking %s from %s", self.scope.base_url, seed)
        start = time.monotonic()

        fetcher = Fetcher(self.session, self.scope)
        self.visited.add_seed(seed)
        self._queue.put_nowait(seed)
        self._queue.put_nowait(PROBE)

        workers = [asyncio.create_task(self._worker(fetcher)) for _ in range(self.concurrency)]
        done_waiter = asyncio.create_task(self._done.wait())
        try:
            await asyncio.wait([done_waiter, *workers], return_when=asyncio.FIRST_COMPLETED)
        finally:
            done_waiter.cancel()
            for w in workers:
                w.cancel()
            outcomes = await asyncio.gather(*workers, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                raise outcome

        duration = time.monotonic() - start
        self.logger.info(
            "Done walking %s: %d pages, %d failures, %d urls seen in %.2f s",
            self.scope.base_url, len(self.pages), len(self.failures), len(self.visited), duration,
        )
        return WalkResult(
            scope=self.scope,
            seed=seed,
            visited=self.visited,
            pages=list(self.pages),
            failures=list(self.failures),
            code_links=list(self.code_links),
            elapsed=duration,
        )

    async def _worker(self, fetcher: Fetcher) -> None:
        while True:
            item = await self._queue.get()
            # no await between get() and the sequence number: dequeue order == seq order
            seq = self._on_dequeue(item)
            if item is PROBE:
                continue
            discovered: List[CrawlTarget] = []
            try:
                discovered = await self._visit(fetcher, item)
            except Exception:
                self.logger.exception("Unexpected failure while walking %s", item)
            finally:
                self._commit(seq, discovered)

    def _on_dequeue(self, item: WorkItem) -> int:
        seq = self._next_seq
        self._next_seq += 1
        if item is not PROBE:
            self._awaiting_second_probe = False
            return seq
        self.logger.debug(
            "Token, queue length %d (%s).", self._queue.qsize(), self.scope.base_url
        )
        if self._awaiting_second_probe:
            self._commit(seq, _FINISHED)
        else:
            self._awaiting_second_probe = True
            self._commit(seq, (PROBE,))
        return seq

    def _commit(self, seq: int, items: Optional[Sequence[WorkItem]]) -> None:
        self._pending[seq] = items
        while self._next_commit in self._pending:
            ready = self._pending.pop(self._next_commit)
            self._next_commit += 1
            if ready is _FINISHED:
                self._done.set()
                return
            for item in ready:
                self._queue.put_nowait(item)

    async def _visit(self, fetcher: Fetcher, target: CrawlTarget) -> List[CrawlTarget]:
        if not self.scope.in_base(target):
            # recorded as seen so it is reported once, but never fetched
            return []

        self.logger.debug("Starting %s.", target)
        outcome = await fetcher.fetch(target)
        if isinstance(outcome, (HttpFailure, TransportFailure)):
            self._report_failure(target, outcome.describe())
            return []
        if isinstance(outcome, OutOfScope):
            return []
        assert isinstance(outcome, Success)

        page_url = outcome.final_url
        self.pages.append(page_url)
        self.logger.debug("Parsing %s.", page_url)
        document = parse_document(outcome.body)

        code = find_link_in_code(document)
        if code is not None:
            markup = str(code)
            self.code_links.append(CodeLinkSighting(page_url, markup))
            self.logger.info("%s: %s", page_url, markup)

        links = self._admit(extract_links(document), page_url)
        self.logger.debug("Finished %s, found %d new links.", page_url, len(links))
        return links

    def _admit(self, hrefs: List[str], page_url: str) -> List[CrawlTarget]:
        new: List[CrawlTarget] = []
        for href in hrefs:
            target = normalize_link(href, page_url)
            if target is None:
                continue
            if not self.scope.admits(target):
                # seen once, so repeated sightings stay quiet
                if self.visited.record_if_first(target, page_url):
                    self.logger.debug("Not following %s (linked from %s).", target, page_url)
                continue
            if self.visited.record_if_first(target, page_url):
                new.append(target)
        return new

    def _report_failure(self, target: CrawlTarget, reason: str) -> None:
        sources = self.visited.sources(target)
        self.failures.append(FailureRecord(str(target), reason, sources))
        limit = self.max_reported_sources
        if not sources:
            shown = "(seed)"
        else:
            shown = ", ".join(sources[:limit] + (["…"] if len(sources) > limit else []))
        self.logger.error("Failed %s (%s), linked from: %s", target, reason, shown)
