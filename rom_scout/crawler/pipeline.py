# rom_scout/crawler/pipeline.py
"""
Cached fetch pipeline: cache lookup, fetch on miss, cache fill, parse.

Both entry points return ``None`` instead of raising; a ``None`` means the
unit produced nothing and the caller should move on to the next one.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup

from rom_scout.crawler.cache import FileStore, ResourceStore, cache_key
from rom_scout.crawler.fetcher import Fetcher
from rom_scout.crawler.pool import WorkerPool
from rom_scout.logger import logger
from rom_scout.progress import ProgressReporter
from rom_scout.utils import last_segment, remove_duplicates

__all__ = ("CachedFetchPipeline", "PipelineStats", "asset_name")


@dataclass(slots=True)
class PipelineStats:
    cache_hits: int = 0
    fetched: int = 0
    failed: int = 0
    storage_errors: int = 0


def asset_name(url: str) -> str:
    """File name for a downloaded asset: the last segment of the URL path."""
    return last_segment(url) or "index"


class CachedFetchPipeline:
    def __init__(
        self,
        fetcher: Fetcher,
        page_store: ResourceStore,
        store_factory: Callable[[Path], ResourceStore] = FileStore,
        show_progress: bool = True,
    ) -> None:
        self.fetcher = fetcher
        self.page_store = page_store
        self.store_factory = store_factory
        self.show_progress = show_progress
        self.stats = PipelineStats()
        self._stores: Dict[Path, ResourceStore] = {}

    async def fetch_page(self, url: str) -> Optional[BeautifulSoup]:
        """Return the parsed document for *url*, from cache when possible."""
        payload = await self._cached_payload(self.page_store, cache_key(url), url)
        if payload is None:
            return None
        return BeautifulSoup(payload.decode("utf-8", errors="replace"), "html.parser")

    async def fetch_and_save(self, url: str, dest_dir: Union[str, Path]) -> Optional[Path]:
        """Download *url* into *dest_dir* unless a non-empty copy already exists."""
        store = self._store_for(Path(dest_dir))
        key = asset_name(url)
        if await self._is_stored(store, key, url):
            self.stats.cache_hits += 1
            logger.debug("Already downloaded: %s", url)
            return store.location(key)

        result = await self.fetcher.fetch(url)
        if not result.ok:
            self.stats.failed += 1
            return None
        self.stats.fetched += 1
        try:
            await store.write(key, result.payload)
        except OSError as exc:
            self.stats.storage_errors += 1
            logger.warning("Cannot save %s to %s: %s", url, store.location(key), exc)
            return None
        return store.location(key)

    async def download_many(
        self,
        urls: Iterable[str],
        dest_dir: Union[str, Path],
        pool: WorkerPool,
        label: str = "Downloading file",
    ) -> List[Optional[Path]]:
        """Fetch each distinct URL into *dest_dir* through *pool*."""
        unique = remove_duplicates([u for u in urls if u])
        dest = Path(dest_dir)

        async def _one(url: str) -> Optional[Path]:
            return await self.fetch_and_save(url, dest)

        logger.info("%s: %d files -> %s", label, len(unique), dest)
        with ProgressReporter(
            len(unique),
            lambda path: f"{label}: '{path.name if path else 'skipped'}'",
            enabled=self.show_progress,
        ) as bar:
            return await pool.run(_one, unique, progress=bar)

    async def _cached_payload(self, store: ResourceStore, key: str, url: str) -> Optional[bytes]:
        if await self._is_stored(store, key, url):
            try:
                payload = await store.read(key)
            except OSError as exc:
                self.stats.storage_errors += 1
                logger.warning("Cannot read cache for %s: %s", url, exc)
            else:
                self.stats.cache_hits += 1
                logger.debug("Cache hit: %s", url)
                return payload

        result = await self.fetcher.fetch(url)
        if not result.ok:
            self.stats.failed += 1
            return None
        self.stats.fetched += 1
        try:
            await store.write(key, result.payload)
        except OSError as exc:
            # the page is still usable, it just will be fetched again next run
            self.stats.storage_errors += 1
            logger.warning("Cannot cache %s at %s: %s", url, store.location(key), exc)
        return result.payload

    async def _is_stored(self, store: ResourceStore, key: str, url: str) -> bool:
        """A failed check counts as a miss: the unit still fetches, only caching may fail."""
        try:
            return await store.exists(key)
        except OSError as exc:
            self.stats.storage_errors += 1
            logger.warning("Cannot check cache %s for %s: %s", store.location(key), url, exc)
            return False

    def _store_for(self, dest_dir: Path) -> ResourceStore:
        store = self._stores.get(dest_dir)
        if store is None:
            store = self._stores[dest_dir] = self.store_factory(dest_dir)
        return store
