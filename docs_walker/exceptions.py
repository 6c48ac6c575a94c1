# File: docs_walker/exceptions.py
"""docs_walker.exceptions: Error hierarchy shared by the walker and its callers."""

from __future__ import annotations

__all__ = ("WalkerError", "LinkParseError", "DisallowedSchemeError", "RepoListingError")


class WalkerError(Exception):
    """Base class for every error raised by DocsWalker."""


class LinkParseError(WalkerError):
    """A hyperlink could not be resolved into an absolute URL."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"cannot parse link {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class DisallowedSchemeError(WalkerError):
    """A hyperlink uses a pseudo-scheme that is never crawled (mailto:, javascript:)."""

    def __init__(self, raw: str, scheme: str) -> None:
        super().__init__(f"{scheme} link {raw!r}")
        self.raw = raw
        self.scheme = scheme


class RepoListingError(WalkerError):
    """Raised when the repository-listing API returns an error."""

    def __init__(self, org: str, status: int | None, message: str) -> None:
        super().__init__(f"cannot list repositories of {org!r}: {message}")
        self.org = org
        self.status = status
