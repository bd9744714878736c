# File: rom_scout/utils.py
"""rom_scout.utils: Small helpers for URLs and lists of URLs."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import urlparse

from rom_scout.logger import logger

__all__: Sequence[str] = (
    "last_segment",
    "remove_duplicates",
)


def last_segment(url: Optional[str]) -> str:
    """Returns the last non-empty path segment of *url* or ``""``."""
    if not url:
        return ""
    return urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Removes duplicates from a list of URLs while keeping the first-seen order."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
