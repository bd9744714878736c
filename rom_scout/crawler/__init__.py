"""rom_scout.crawler: кэш, загрузчик, пул воркеров и конвейер поверх них."""

from rom_scout.crawler.cache import FileStore, MemoryStore, ResourceStore, cache_key
from rom_scout.crawler.fetcher import Fetcher
from rom_scout.crawler.models import FetchResult
from rom_scout.crawler.pipeline import CachedFetchPipeline
from rom_scout.crawler.pool import WorkerPool

__all__ = [
    "CachedFetchPipeline",
    "FetchResult",
    "Fetcher",
    "FileStore",
    "MemoryStore",
    "ResourceStore",
    "WorkerPool",
    "cache_key",
]
