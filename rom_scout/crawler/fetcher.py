# rom_scout/crawler/fetcher.py
"""
Fetcher module: the only place that talks to the network.

Every request gets a per-attempt timeout and a fixed number of attempts.
Once the attempts are used up the error is logged and swallowed: the caller
receives an absent :class:`FetchResult` and carries on with the batch.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse

from aiohttp import ClientError, ClientSession, ClientTimeout

from rom_scout.config import CrawlerConfig
from rom_scout.crawler.models import FetchResult
from rom_scout.logger import logger

__all__ = ("Fetcher", "RetryableStatus")


class RetryableStatus(ClientError):
    """Server answered with a status worth another attempt (429, 5xx)."""


class Fetcher:
    """Handles HTTP fetching with timeout, bounded retries and failure suppression."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.requests = 0

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def resolve(self, url: str) -> str:
        """Resolve scheme-less URLs against the configured base origin."""
        if urlparse(url).scheme:
            return url
        return urljoin(self.config.base_origin + "/", url)

    async def fetch(self, url: str) -> FetchResult:
        """
        GET *url* and return its body.

        Returns an absent FetchResult after ``config.retries`` failed attempts
        or on a non-retryable HTTP error status.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        target = self.resolve(url)
        timeout = ClientTimeout(total=self.config.timeout)
        attempts = 0
        last_error: Optional[BaseException] = None
        while attempts < self.config.retries:
            attempts += 1
            self.requests += 1
            try:
                async with self.session.get(target, timeout=timeout) as resp:
                    if resp.status in self._RETRY_STATUS:
                        raise RetryableStatus(f"retryable status {resp.status}")
                    if resp.status >= 400:
                        logger.warning("Failed to download %s: HTTP %s", target, resp.status)
                        return FetchResult.absent(url)
                    return FetchResult(url, await resp.read())
            except (ClientError, asyncio.TimeoutError) as exc:
                last_error = exc
                logger.warning(
                    "Failed to download %s (attempt %d/%d): %r",
                    target, attempts, self.config.retries, exc,
                )
        logger.error("Giving up on %s after %d attempts: %r", target, attempts, last_error)
        return FetchResult.absent(url)
