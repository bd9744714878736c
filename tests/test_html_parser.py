from bs4 import BeautifulSoup
from rom_scout.parser.html_parser import (
    RomTag,
    extract_download_link,
    extract_extras,
    extract_tiles,
    page_count,
)


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


PAGINATION = """
<ul class="pagination">
  <li class="page-item"><a href="/roms/nes/page/1">1</a></li>
  <li class="page-item"><a href="/roms/nes/page/2">2</a></li>
  <li class="page-item"><a href="/roms/nes/page/37">Last</a></li>
</ul>
"""

TILE = """
<div class="thumbnail-home">
  <div class="imgCon"><img data-src="/thumbs/mario.jpg" alt=""></div>
  <div class="infoBox"><a href="/roms/nes/super-mario-bros"> Super Mario Bros </a></div>
  <span class="emulator"> NES </span>
  <a rel="tag" href="/tags/platform">Platform </a>
  <a rel="tag" href="/tags/classic/">Classic</a>
</div>
"""


def test_page_count_from_last_pagination_link():
    assert page_count(soup(PAGINATION)) == 37


def test_page_count_defaults_to_one():
    assert page_count(soup("<p>no pagination</p>")) == 1
    assert page_count(None) == 1
    assert page_count(soup('<ul><li class="page-item"><a href="/roms/nes/page/next">»</a></li></ul>')) == 1


def test_extract_tile_fields():
    (tile,) = extract_tiles(soup(TILE))
    assert tile.id == "super-mario-bros"
    assert tile.title == "Super Mario Bros"
    assert tile.href == "/roms/nes/super-mario-bros"
    assert tile.emulator == "NES"
    assert tile.thumbnail == "/thumbs/mario.jpg"
    assert tile.tags == [RomTag("platform", "Platform"), RomTag("classic", "Classic")]


def test_thumbnail_attribute_priority():
    html = '<div class="thumbnail-home"><div class="imgCon"><img src="" srcset="/a.jpg 1x" data-src="/b.jpg"></div></div>'
    (tile,) = extract_tiles(soup(html))
    assert tile.thumbnail == "/a.jpg 1x"


def test_missing_markup_leaves_gaps():
    (tile,) = extract_tiles(soup('<div class="thumbnail-home"></div>'))
    assert tile.id is None
    assert tile.title is None
    assert tile.href == ""
    assert tile.emulator == ""
    assert tile.tags == []
    assert tile.thumbnail is None
    assert extract_tiles(None) == []


def test_tiles_keep_document_order():
    html = TILE + TILE.replace("super-mario-bros", "zelda").replace("Super Mario Bros", "Zelda")
    assert [t.id for t in extract_tiles(soup(html))] == ["super-mario-bros", "zelda"]


def test_extract_extras_prefers_href_then_src_then_text():
    html = """
    <div itemprop="name"> Super Mario Bros </div>
    <img itemprop="image" src="/images/mario.png">
    <a itemprop="downloadUrl" href="/download/mario" src="/ignored">Download</a>
    <span itemprop="genre">Action</span>
    <span itemprop="genre">Platform</span>
    """
    assert extract_extras(soup(html)) == {
        "name": "Super Mario Bros",
        "image": "/images/mario.png",
        "downloadUrl": "/download/mario",
        "genre": "Platform",
    }
    assert extract_extras(None) == {}


def test_extract_download_link():
    html = '<a href="/ads">ad</a><a rel="nofollow" href="https://dl.example.org/mario.zip">Get</a>'
    assert extract_download_link(soup(html)) == "https://dl.example.org/mario.zip"
    assert extract_download_link(soup("<a href='/x'>x</a>")) == ""
    assert extract_download_link(None) == ""
