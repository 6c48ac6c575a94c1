# File: docs_walker/engine.py
"""docs_walker.engine: Orchestration layer for running walks and aggregating their results."""

from __future__ import annotations

import asyncio
from typing import Iterable, List, Optional

from aiohttp import ClientSession, ClientTimeout

from docs_walker.aggregator import WalkReport, aggregate_results
from docs_walker.config import WalkerConfig
from docs_walker.crawler.crawler import AsyncWalker
from docs_walker.crawler.models import CrawlTarget, WalkResult
from docs_walker.crawler.normalizer import parse_link
from docs_walker.crawler.scope import CrawlScope
from docs_walker.logger import logger
from docs_walker.repos import GitHubRepoLister, Repository, repo_scope

__all__ = ["Engine", "walk_scope", "walk_site", "walk_org", "list_org_repos"]


async def walk_scope(
    config: WalkerConfig, scope: CrawlScope, seed: Optional[CrawlTarget] = None
) -> WalkResult:
    """Walk one scope from *seed* (default: the scope's base URL)."""
    async with AsyncWalker(config, scope) as walker:
        return await walker.walk(seed or parse_link(scope.base_url, scope.base_url))


async def walk_site(config: WalkerConfig) -> WalkResult:
    """Walk the site described by *config*."""
    async with AsyncWalker(config) as walker:
        return await walker.walk(config.seed())


async def list_org_repos(config: WalkerConfig, org: str) -> List[Repository]:
    timeout = ClientTimeout(total=config.timeout)
    async with ClientSession(timeout=timeout, headers={"User-Agent": config.user_agent}) as session:
        return await GitHubRepoLister(session, config.github).list_repos(org)


async def walk_org(
    config: WalkerConfig, org: str, only: Optional[Iterable[str]] = None
) -> List[WalkResult]:
    """Walk the default-branch tree of every repository of *org*, one scope after another."""
    repos = await list_org_repos(config, org)
    wanted = set(only) if only else None
    results: List[WalkResult] = []
    for repo in repos:
        if wanted is not None and repo.name not in wanted:
            continue
        scope = repo_scope(org, repo.name, repo.default_branch, config.github.web_url)
        results.append(await walk_scope(config, scope))
    logger.info("Walked %d repositories of %s", len(results), org)
    return results


class Engine:
    """Blocking facade over the async walks: run one, then aggregate its results."""

    def __init__(self, config: WalkerConfig, walk_timeout: Optional[float] = None) -> None:
        self.config = config
        self.walk_timeout = walk_timeout

    def _run(self, coro):
        if self.walk_timeout:
            coro = asyncio.wait_for(coro, timeout=self.walk_timeout)
        try:
            return asyncio.run(coro)
        except asyncio.TimeoutError:
            logger.error("Walk did not finish within %s seconds", self.walk_timeout)
            raise

    def run(self) -> WalkReport:
        """Walk the configured site; blocks until the walk is quiescent."""
        return aggregate_results([self._run(walk_site(self.config))])

    def run_org(self, org: str, only: Optional[Iterable[str]] = None) -> WalkReport:
        """Walk every repository of *org*; blocks until the last walk finishes."""
        return aggregate_results(self._run(walk_org(self.config, org, only)))
