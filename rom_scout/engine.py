# File: rom_scout/engine.py
"""rom_scout.engine: Оркестрация обхода каталога, сбора записей и загрузки файлов."""

from __future__ import annotations

from typing import List, Optional

from aiohttp import ClientSession
from bs4 import BeautifulSoup

from rom_scout.aggregator import (
    CrawlReport,
    RomRecord,
    download_page_urls,
    image_urls,
    thumbnail_urls,
)
from rom_scout.config import CrawlerConfig
from rom_scout.crawler.cache import FileStore, ResourceStore
from rom_scout.crawler.fetcher import Fetcher
from rom_scout.crawler.pipeline import CachedFetchPipeline
from rom_scout.crawler.pool import WorkerPool
from rom_scout.logger import logger
from rom_scout.parser.html_parser import (
    RomTile,
    extract_download_link,
    extract_extras,
    extract_tiles,
    page_count,
)
from rom_scout.progress import ProgressReporter
from rom_scout.report.json_report import render_json
from rom_scout.utils import remove_duplicates

__all__ = ["Engine", "start_crawl"]


class Engine:
    """Фасад для CLI и тестов: стадии обхода выполняются строго по очереди."""

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        session: Optional[ClientSession] = None,
        page_store: Optional[ResourceStore] = None,
    ) -> None:
        """session и page_store подменяются в тестах."""
        self.config = config
        self.pool = WorkerPool(config.concurrency)
        self._session = session
        self._page_store = page_store

    async def crawl(self) -> CrawlReport:
        """Полный проход: страницы, плитки, записи, файл записей, загрузки."""
        cfg = self.config
        for directory in (cfg.cache_dir, cfg.thumbs_dir, cfg.roms_dir):
            directory.mkdir(parents=True, exist_ok=True)

        report = CrawlReport()
        async with Fetcher(cfg, session=self._session) as fetcher:
            pipeline = CachedFetchPipeline(
                fetcher,
                self._page_store or FileStore(cfg.cache_dir),
                show_progress=cfg.progress,
            )

            pages = await self._fetch_list_pages(pipeline)
            report.pages_fetched = len(pages)
            tiles = [tile for page in pages for tile in extract_tiles(page)]
            logger.info("Found %d tiles on %d pages", len(tiles), len(pages))

            report.records = await self._fetch_records(pipeline, tiles)
            saved = render_json(report.records, cfg.records_path)
            logger.info("Saved %d records to %s", len(report.records), saved)

            # классы файлов загружаются строго один за другим
            thumbs = await pipeline.download_many(
                thumbnail_urls(report.records), cfg.thumbs_dir, self.pool, "Downloading thumbnail"
            )
            images = await pipeline.download_many(
                image_urls(report.records), cfg.images_dir, self.pool, "Downloading image"
            )
            rom_urls = await self._resolve_rom_urls(pipeline, download_page_urls(report.records))
            roms = await pipeline.download_many(rom_urls, cfg.roms_dir, self.pool, "Downloading ROM")

        for target, results in ((report.thumbnails, thumbs), (report.images, images), (report.roms, roms)):
            target.extend(str(p) for p in results if p is not None)
            report.skipped += sum(1 for p in results if p is None)

        stats = pipeline.stats
        logger.info(
            "Done: %d records, %d files, %d cache hits, %d fetched, %d failed, peak concurrency %d",
            len(report.records),
            len(report.thumbnails) + len(report.images) + len(report.roms),
            stats.cache_hits,
            stats.fetched,
            stats.failed,
            self.pool.peak,
        )
        return report

    async def _fetch_list_pages(self, pipeline: CachedFetchPipeline) -> List[BeautifulSoup]:
        pages: List[BeautifulSoup] = []
        for emulator in self.config.emulators:
            count = page_count(await pipeline.fetch_page(f"/roms/{emulator}"))
            urls = [f"/roms/{emulator}/page/{n}" for n in range(1, count + 1)]
            logger.info("%s: %d pages", emulator, count)
            with ProgressReporter(
                count,
                lambda _doc: f"Downloading pages for {emulator}",
                enabled=self.config.progress,
            ) as bar:
                docs = await self.pool.run(pipeline.fetch_page, urls, progress=bar)
            pages.extend(doc for doc in docs if doc is not None)
        return pages

    async def _fetch_records(
        self, pipeline: CachedFetchPipeline, tiles: List[RomTile]
    ) -> List[RomRecord]:
        async def _record(tile: RomTile) -> RomRecord:
            doc = await pipeline.fetch_page(tile.href) if tile.href else None
            return RomRecord.from_tile(tile, extract_extras(doc))

        with ProgressReporter(
            len(tiles),
            lambda rec: f"Downloading ROM metadata: {rec.title if rec else '-'}",
            enabled=self.config.progress,
        ) as bar:
            records = await self.pool.run(_record, tiles, progress=bar)
        return [r for r in records if r is not None]

    async def _resolve_rom_urls(
        self, pipeline: CachedFetchPipeline, page_urls: List[str]
    ) -> List[str]:
        async def _link(url: str) -> str:
            return extract_download_link(await pipeline.fetch_page(url))

        with ProgressReporter(
            len(page_urls),
            lambda _url: "Fetching ROMs download URLs",
            enabled=self.config.progress,
        ) as bar:
            links = await self.pool.run(_link, page_urls, progress=bar)
        return remove_duplicates([link for link in links if link])


async def start_crawl(config: CrawlerConfig) -> CrawlReport:
    """Точка входа для CLI (запускается через asyncio.run)."""
    logger.info("Starting crawl of %s", config.base_origin)
    return await Engine(config).crawl()
