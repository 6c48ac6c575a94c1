# File: tests/conftest.py
import logging
from collections import Counter
from collections.abc import AsyncIterator, Callable
from typing import Dict

import pytest
from aiohttp import web

from docs_walker.config import WalkerConfig


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


def html_app(pages: Dict[str, str], hits: Counter, statuses: Dict[str, int] | None = None):
    """
    Build an aiohttp app serving *pages* (path -> HTML body).

    Every request is counted in *hits* by path; paths in *statuses* answer
    with that status and no body.
    """
    statuses = statuses or {}
    app = web.Application()

    async def handle(request: web.Request) -> web.Response:
        path = request.path
        hits[path] += 1
        if path in statuses:
            return web.Response(status=statuses[path])
        if path not in pages:
            return web.Response(status=404)
        return web.Response(text=pages[path], content_type="text/html")

    app.router.add_get("/{tail:.*}", handle)
    return app


@pytest.fixture()
def make_config() -> Callable[..., WalkerConfig]:
    """Return a factory for WalkerConfig with test-friendly defaults."""

    def factory(base_url: str, **overrides) -> WalkerConfig:
        data = {
            "base_url": base_url,
            "concurrency": 4,
            "timeout": 5.0,
            "user_agent": "TestAgent/1.0",
        }
        data.update(overrides)
        return WalkerConfig(**data)

    return factory


@pytest.fixture()
def walker_logs(caplog):
    """
    Capture records of the project logger.

    The project logger does not propagate, so caplog's handler is attached
    to it directly.
    """
    lg = logging.getLogger("DocsWalker")
    lg.addHandler(caplog.handler)
    old_level = lg.level
    lg.setLevel(logging.DEBUG)
    caplog.handler.setLevel(logging.DEBUG)
    try:
        yield caplog
    finally:
        lg.removeHandler(caplog.handler)
        lg.setLevel(old_level)
