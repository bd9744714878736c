# File: rom_scout/aggregator.py
"""rom_scout.aggregator: Сборка записей каталога и списков файлов для загрузки."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from rom_scout.parser.html_parser import RomTag, RomTile
from rom_scout.utils import remove_duplicates


@dataclass(frozen=True, slots=True)
class RomRecord:
    """Запись о ROM: данные плитки списка плюс микроразметка страницы."""

    id: Optional[str]
    title: Optional[str]
    href: str
    emulator: str
    tags: List[RomTag] = field(default_factory=list)
    thumbnail: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_tile(cls, tile: RomTile, extras: Optional[Dict[str, str]] = None) -> RomRecord:
        return cls(
            id=tile.id,
            title=tile.title,
            href=tile.href,
            emulator=tile.emulator,
            tags=list(tile.tags),
            thumbnail=tile.thumbnail,
            extras=dict(extras or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CrawlReport:
    """Итог обхода: записи и пути загруженных файлов по классам."""

    records: List[RomRecord] = field(default_factory=list)
    pages_fetched: int = 0
    thumbnails: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    roms: List[str] = field(default_factory=list)
    skipped: int = 0

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-сводку без самих записей."""
        output = {k: v for k, v in asdict(self).items() if k != "records"}
        output["records"] = len(self.records)
        return json.dumps(output, ensure_ascii=False, indent=2 if pretty else None)


def thumbnail_urls(records: Iterable[RomRecord]) -> List[str]:
    """Уникальные URL миниатюр в порядке первого появления."""
    return remove_duplicates([r.thumbnail for r in records if r.thumbnail])


def image_urls(records: Iterable[RomRecord]) -> List[str]:
    """Уникальные URL обложек (itemprop=image)."""
    return remove_duplicates([r.extras["image"] for r in records if r.extras.get("image")])


def download_page_urls(records: Iterable[RomRecord]) -> List[str]:
    """Уникальные URL страниц загрузки (itemprop=downloadUrl)."""
    return remove_duplicates(
        [r.extras["downloadUrl"] for r in records if r.extras.get("downloadUrl")]
    )
