# File: tests/conftest.py
from collections import Counter
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Callable, Dict, Tuple, Union

import pytest
from aiohttp import web

from rom_scout.config import CrawlerConfig

Route = Tuple[Union[str, bytes], str]


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def static_app(routes: Dict[str, Route], hits: Counter) -> web.Application:
    """App answering GET *path* from *routes*, 404 otherwise; counts hits per path."""
    app = web.Application()

    async def handle(request: web.Request) -> web.Response:
        hits[request.path] += 1
        if request.path not in routes:
            return web.Response(status=404, text="not found")
        body, content_type = routes[request.path]
        if isinstance(body, bytes):
            return web.Response(body=body, content_type=content_type)
        return web.Response(text=body, content_type=content_type)

    app.router.add_get("/{tail:.*}", handle)
    return app


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., CrawlerConfig]:
    """
    Factory for a quiet, fast CrawlerConfig writing under tmp_path.
    Keyword arguments override the defaults.
    """

    def _make(**overrides) -> CrawlerConfig:
        params = dict(
            base_url="http://example.com",
            output_dir=tmp_path / "output",
            concurrency=4,
            timeout=2.0,
            retries=3,
            user_agent="TestAgent/1.0",
            progress=False,
        )
        params.update(overrides)
        return CrawlerConfig(**params)

    return _make


@pytest.fixture()
def hits() -> Counter:
    return Counter()


@pytest.fixture()
def static_server(unused_tcp_port: int, hits: Counter):
    """
    Returns an async context factory: ``async with static_server(routes) as base``.
    """
    @asynccontextmanager
    async def _start(routes: Dict[str, Route]):
        gen = serve_app(static_app(routes, hits), unused_tcp_port)
        base = await gen.__anext__()
        try:
            yield base
        finally:
            await gen.aclose()

    return _start
