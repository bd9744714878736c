# rom_scout/crawler/cache.py
"""
Key -> bytes stores backing the fetch pipeline.

:class:`FileStore` keeps one file per key under a root directory and is what
real runs use; :class:`MemoryStore` implements the same contract for tests.
An entry that is missing or empty is reported as absent, so a file left
half-written by an interrupted run is simply fetched again.
"""
from __future__ import annotations

import asyncio
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol, Union

__all__ = ("ResourceStore", "FileStore", "MemoryStore", "cache_key")


_MAX_NAME_BYTES = 255


def cache_key(url: str, suffix: str = ".html") -> str:
    """Deterministic file name for *url*: path separators become ``_``.

    Names that would exceed the usual 255-byte file name limit are cut and
    get a sha1 of the full URL appended, so they stay unique.
    """
    key = url.replace("/", "_")
    if len((key + suffix).encode("utf-8")) <= _MAX_NAME_BYTES:
        return key + suffix
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()
    head = key.encode("utf-8")[:150].decode("utf-8", errors="ignore")
    return f"{head}_{digest}{suffix}"


class ResourceStore(Protocol):
    async def exists(self, key: str) -> bool: ...

    async def read(self, key: str) -> bytes: ...

    async def write(self, key: str, data: bytes) -> None: ...

    def location(self, key: str) -> Path: ...


class FileStore:
    """Stores each key as ``root / key``."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def location(self, key: str) -> Path:
        return self.root / key

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._exists, self.location(key))

    async def read(self, key: str) -> bytes:
        return await asyncio.to_thread(self.location(key).read_bytes)

    async def write(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, self.location(key), data)

    @staticmethod
    def _exists(path: Path) -> bool:
        # only "not found" means absent; permission errors and the like propagate
        try:
            st = path.stat()
        except FileNotFoundError:
            return False
        return path.is_file() and st.st_size > 0

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


class MemoryStore:
    """In-memory store with the same semantics as :class:`FileStore`."""

    def __init__(self, root: Union[str, Path] = "memory") -> None:
        self.root = Path(root)
        self.data: Dict[str, bytes] = {}
        self.writes = 0

    def location(self, key: str) -> Path:
        return self.root / key

    async def exists(self, key: str) -> bool:
        return bool(self.data.get(key))

    async def read(self, key: str) -> bytes:
        try:
            return self.data[key]
        except KeyError:
            raise FileNotFoundError(key) from None

    async def write(self, key: str, data: bytes) -> None:
        self.writes += 1
        self.data[key] = bytes(data)
