# docs_walker/crawler/fetcher.py
"""
Fetcher module: one GET per target, no retries.
"""
from __future__ import annotations

import asyncio
import logging

from aiohttp import ClientError, ClientSession

from docs_walker.crawler.models import (
    CrawlTarget,
    FetchOutcome,
    HttpFailure,
    OutOfScope,
    Success,
    TransportFailure,
)
from docs_walker.crawler.scope import CrawlScope

__all__ = ("Fetcher",)

logger = logging.getLogger("DocsWalker")


class Fetcher:
    """Fetches pages through a shared session and checks where redirects led."""

    def __init__(self, session: ClientSession, scope: CrawlScope) -> None:
        self.session = session
        self.scope = scope

    async def fetch(self, target: CrawlTarget) -> FetchOutcome:
        """
        GET *target*, following the transport's redirects.

        Returns Success only for a 2xx response whose final URL is still under
        the base prefix; the body is never read otherwise. A failure is final:
        nothing is retried here or by the caller.
        """
        try:
            async with self.session.get(str(target), allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    return HttpFailure(resp.status)
                final_url = str(resp.url)
                if not self.scope.in_base(final_url):
                    logger.debug("Redirected out of scope: %s -> %s", target, final_url)
                    return OutOfScope(final_url)
                body = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            return TransportFailure("timed out")
        except ClientError as exc:
            return TransportFailure(f"{type(exc).__name__}: {exc}")
        return Success(final_url, body)
