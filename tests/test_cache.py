"""Tests for the key -> bytes stores used by the fetch pipeline."""
import asyncio
from pathlib import Path

import pytest
from rom_scout.crawler.cache import FileStore, MemoryStore, cache_key


def test_cache_key_is_deterministic_and_flat():
    url = "https://www.consoleroms.com/roms/nes/page/2"
    assert cache_key(url) == cache_key(url)
    assert "/" not in cache_key(url)
    assert cache_key("/roms/nes") == "_roms_nes.html"
    assert cache_key("/roms/nes", suffix="") == "_roms_nes"


def test_cache_key_distinguishes_urls():
    assert cache_key("/roms/nes/page/1") != cache_key("/roms/nes/page/2")


def test_long_cache_key_fits_a_file_name():
    base = "https://www.consoleroms.com/roms/nes/" + "x" * 300
    key = cache_key(base)
    assert len(key.encode("utf-8")) <= 255
    assert key == cache_key(base)
    assert key.endswith(".html")
    assert key != cache_key(base + "y")
    assert len(cache_key("/" + "é" * 200).encode("utf-8")) <= 255


@pytest.mark.asyncio()
async def test_file_store_roundtrip_creates_directories(tmp_path: Path):
    store = FileStore(tmp_path / "deep" / "cache")
    assert not await store.exists("a.html")
    await store.write("a.html", b"<html>a</html>")
    assert await store.exists("a.html")
    assert await store.read("a.html") == b"<html>a</html>"
    assert store.location("a.html") == tmp_path / "deep" / "cache" / "a.html"


@pytest.mark.asyncio()
async def test_zero_byte_file_is_a_miss(tmp_path: Path):
    (tmp_path / "partial.html").write_bytes(b"")
    store = FileStore(tmp_path)
    assert not await store.exists("partial.html")


@pytest.mark.asyncio()
async def test_directory_is_not_an_entry(tmp_path: Path):
    (tmp_path / "dir.html").mkdir()
    assert not await FileStore(tmp_path).exists("dir.html")


@pytest.mark.asyncio()
async def test_concurrent_writes_same_key_leave_a_whole_file(tmp_path: Path):
    store = FileStore(tmp_path)
    payloads = [bytes([i]) * 100_000 for i in range(1, 9)]
    await asyncio.gather(*(store.write("same.bin", p) for p in payloads))
    data = await store.read("same.bin")
    assert data in payloads
    # no temporary files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["same.bin"]


@pytest.mark.asyncio()
async def test_stat_errors_other_than_not_found_propagate(tmp_path: Path, monkeypatch):
    store = FileStore(tmp_path)

    def denied(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "stat", denied)
    with pytest.raises(PermissionError):
        await store.exists("x.html")


@pytest.mark.asyncio()
async def test_memory_store_semantics():
    store = MemoryStore()
    assert not await store.exists("k")
    await store.write("empty", b"")
    assert not await store.exists("empty")
    await store.write("k", b"v")
    assert await store.exists("k")
    assert await store.read("k") == b"v"
    assert store.writes == 2
    with pytest.raises(FileNotFoundError):
        await store.read("missing")
