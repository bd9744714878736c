# rom_scout/crawler/models.py
"""
Data models for the RomScout fetch pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one fetch: a payload, or ``None`` when the unit gave up."""

    url: str
    payload: Optional[bytes] = None

    @classmethod
    def absent(cls, url: str) -> FetchResult:
        return cls(url, None)

    @property
    def ok(self) -> bool:
        return self.payload is not None

    def text(self, encoding: str = "utf-8") -> str:
        if self.payload is None:
            return ""
        return self.payload.decode(encoding, errors="replace")
