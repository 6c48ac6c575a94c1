# docs_walker/crawler/normalizer.py
"""
Link normalization: turns a raw ``href`` value into a comparable absolute URL.

Normalized form = scheme + authority + path + query. The fragment is dropped,
scheme and host are lower-cased and a missing path becomes ``/``, so that
re-normalizing a normalized URL gives the same URL back.
"""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from docs_walker.crawler.models import CrawlTarget
from docs_walker.crawler.scope import FETCHABLE_SCHEMES
from docs_walker.exceptions import DisallowedSchemeError, LinkParseError

__all__ = ("DISALLOWED_PREFIXES", "parse_link", "normalize_link")

logger = logging.getLogger("DocsWalker")

DISALLOWED_PREFIXES = ("mailto:", "javascript:")


def _netloc(parts: SplitResult) -> str:
    # lower-case the host but keep userinfo and port as written
    netloc = parts.netloc
    userinfo, at, hostport = netloc.rpartition("@")
    if hostport.startswith("["):
        host, bracket, rest = hostport.partition("]")
        hostport = host.lower() + bracket + rest
    else:
        host, colon, port = hostport.partition(":")
        hostport = host.lower() + colon + port
    return f"{userinfo}{at}{hostport}"


def parse_link(raw: str, page_url: str) -> CrawlTarget:
    """
    Resolve *raw* against *page_url*.

    *raw* is an attribute value as the HTML parser returns it, with entities
    already decoded; it is not decoded again.

    Raises :class:`DisallowedSchemeError` for ``mailto:``/``javascript:`` links
    and :class:`LinkParseError` when the result is not a usable absolute URL.
    """
    value = raw.strip()
    lowered = value.lower()
    for prefix in DISALLOWED_PREFIXES:
        if lowered.startswith(prefix):
            raise DisallowedSchemeError(value, prefix[:-1])

    try:
        parts = urlsplit(urljoin(page_url, value))
        # .port validates the port component
        parts.port
    except ValueError as exc:
        raise LinkParseError(value, str(exc)) from exc

    if not parts.scheme:
        raise LinkParseError(value, "not an absolute URL")
    if parts.scheme.lower() in FETCHABLE_SCHEMES and not parts.hostname:
        raise LinkParseError(value, "missing host")

    path = parts.path or ("/" if parts.netloc else "")
    return CrawlTarget(urlunsplit((parts.scheme.lower(), _netloc(parts), path, parts.query, "")))


def normalize_link(raw: str, page_url: str) -> Optional[CrawlTarget]:
    """Like :func:`parse_link`, but logs the failure and returns None instead of raising."""
    try:
        return parse_link(raw, page_url)
    except DisallowedSchemeError as exc:
        logger.warning("%s: skipping %s", page_url, exc)
    except LinkParseError as exc:
        logger.error("%s: %s", page_url, exc)
    return None
