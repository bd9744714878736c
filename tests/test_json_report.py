"""Tests for the records file writer."""
import json

import pytest
import rom_scout.report.json_report as json_report
from rom_scout.aggregator import RomRecord
from rom_scout.report import render_json


def _records():
    return [RomRecord(id="mario", title="Mario", href="/roms/nes/mario", emulator="NES")]


def test_render_json_writes_array(tmp_path):
    path = render_json(_records(), tmp_path / "out" / "roms.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert [item["id"] for item in data] == ["mario"]
    assert sorted(p.name for p in path.parent.iterdir()) == ["roms.json"]


def test_failed_write_leaves_no_partial_file(tmp_path, monkeypatch):
    target = tmp_path / "roms.json"
    target.write_text("[]", encoding="utf-8")

    def broken_dump(*args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(json_report.json, "dump", broken_dump)
    with pytest.raises(OSError):
        render_json(_records(), target)

    assert sorted(p.name for p in tmp_path.iterdir()) == ["roms.json"]
    assert target.read_text(encoding="utf-8") == "[]"
