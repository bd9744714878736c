# File: rom_scout/report/__init__.py
"""rom_scout.report: Сохранение итоговых записей каталога."""

from rom_scout.report.json_report import render_json

__all__ = ["render_json"]
