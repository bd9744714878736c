"""HTML extraction rules for the ROM catalog.

Everything here is synchronous and works on an already parsed
:class:`bs4.BeautifulSoup` document.  Missing markup is never an error: a
selector that matches nothing yields ``None``, ``""`` or an empty
collection, and the record simply has a gap there.

* :func:`page_count`: number of list pages of one emulator section.
* :func:`extract_tiles`: one :class:`RomTile` per catalog tile.
* :func:`extract_extras`: ``itemprop`` microdata from a detail page.
* :func:`extract_download_link`: the real binary URL on a download page.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag

from rom_scout.utils import last_segment

__all__: Sequence[str] = (
    "RomTag",
    "RomTile",
    "page_count",
    "extract_tiles",
    "extract_extras",
    "extract_download_link",
)

_THUMBNAIL_ATTRS: tuple[str, ...] = ("src", "srcset", "data-src", "data-srcset")


@dataclass(frozen=True, slots=True)
class RomTag:
    id: str
    label: str


@dataclass(frozen=True, slots=True)
class RomTile:
    """One entry of a catalog list page."""

    id: Optional[str]
    title: Optional[str]
    href: str
    emulator: str
    tags: list[RomTag] = field(default_factory=list)
    thumbnail: Optional[str] = None


def _attr(tag: Optional[Tag], name: str) -> Optional[str]:
    if tag is None:
        return None
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def page_count(doc: Optional[BeautifulSoup]) -> int:
    """Reads the last pagination link; a section without pagination has one page."""
    if doc is None:
        return 1
    href = _attr(doc.select_one("li.page-item:last-child a"), "href")
    segment = last_segment(href)
    try:
        return max(1, int(segment))
    except ValueError:
        return 1


def _tile(node: Tag) -> RomTile:
    info_box = node.select_one(".infoBox")
    anchor = info_box.find("a") if info_box is not None else None
    href = _attr(anchor, "href") or ""

    img_con = node.select_one(".imgCon")
    img = img_con.find("img") if img_con is not None else None
    thumbnail = next((v for v in (_attr(img, a) for a in _THUMBNAIL_ATTRS) if v), None)

    emulator_node = node.select_one(".emulator")
    tags = [
        RomTag(id=last_segment(_attr(a, "href")), label=a.get_text().strip())
        for a in node.select("[rel='tag']")
    ]
    return RomTile(
        id=last_segment(href) or None,
        title=anchor.get_text().strip() if anchor is not None else None,
        href=href,
        emulator=emulator_node.get_text().strip() if emulator_node is not None else "",
        tags=tags,
        thumbnail=thumbnail,
    )


def extract_tiles(doc: Optional[BeautifulSoup]) -> list[RomTile]:
    """Returns every ``.thumbnail-home`` tile of a list page in document order."""
    if doc is None:
        return []
    return [_tile(node) for node in doc.select(".thumbnail-home")]


def extract_extras(doc: Optional[BeautifulSoup]) -> dict[str, str]:
    """Collects ``itemprop`` values: ``href``, else ``src``, else the element text.

    A later element with the same ``itemprop`` overrides an earlier one.
    """
    if doc is None:
        return {}
    extras: dict[str, str] = {}
    for node in doc.select("[itemprop]"):
        name = _attr(node, "itemprop")
        if not name:
            continue
        extras[name] = _attr(node, "href") or _attr(node, "src") or node.get_text().strip()
    return extras


def extract_download_link(doc: Optional[BeautifulSoup]) -> str:
    """The ``rel=nofollow`` anchor on a download page points at the binary."""
    if doc is None:
        return ""
    return _attr(doc.select_one("a[rel='nofollow']"), "href") or ""
