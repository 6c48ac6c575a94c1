# File: docs_walker/repos.py
"""docs_walker.repos: Listing an organisation's repositories to seed extra walks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from aiohttp import ClientError, ClientSession

from docs_walker.config import GitHubConfig
from docs_walker.crawler.scope import CrawlScope
from docs_walker.exceptions import RepoListingError
from docs_walker.logger import logger

__all__ = ("API_VERSION", "Repository", "GitHubRepoLister", "repo_scope")

API_VERSION = "2022-11-28"


@dataclass(frozen=True, slots=True)
class Repository:
    """Name and default branch of one repository."""

    name: str
    default_branch: str

    @classmethod
    def from_api_payload(cls, payload: Mapping[str, Any]) -> Repository:
        try:
            return cls(name=str(payload["name"]), default_branch=str(payload["default_branch"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"unexpected repository payload: {exc!r}") from exc


def repo_scope(org: str, repo: str, branch: str, web_url: str = "https://github.com") -> CrawlScope:
    """Scope of a repository's file tree on one branch; other branches are ignored."""
    root = f"{web_url.rstrip('/')}/{org}/{repo}/tree/"
    return CrawlScope(base_url=f"{root}{branch}/", ignored_url=root)


class GitHubRepoLister:
    """Pages through ``GET /orgs/{org}/repos`` of the GitHub REST API."""

    def __init__(self, session: ClientSession, config: Optional[GitHubConfig] = None) -> None:
        self.session = session
        self.config = config or GitHubConfig()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        token = self.config.resolve_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def list_repos(self, org: str) -> List[Repository]:
        """Return every repository of *org*; raises :class:`RepoListingError` on API errors."""
        url = f"{self.config.api_url}/orgs/{org}/repos"
        per_page = self.config.per_page
        repos: List[Repository] = []
        page = 1
        while True:
            params = {"per_page": str(per_page), "page": str(page)}
            try:
                async with self.session.get(url, params=params, headers=self._headers()) as resp:
                    if resp.status != 200:
                        text = await resp.text()
                        raise RepoListingError(org, resp.status, f"HTTP {resp.status}: {text[:200]}")
                    payload = await resp.json(content_type=None)
            except (ClientError, ValueError) as exc:
                raise RepoListingError(org, None, str(exc)) from exc

            if not isinstance(payload, list):
                raise RepoListingError(org, 200, "expected a JSON list of repositories")
            try:
                repos.extend(Repository.from_api_payload(item) for item in payload)
            except ValueError as exc:
                raise RepoListingError(org, 200, str(exc)) from exc
            logger.debug("Listed page %d of %s: %d repositories", page, org, len(payload))
            if len(payload) < per_page:
                return repos
            page += 1
