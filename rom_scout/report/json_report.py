# rom_scout/report/json_report.py

"""
Запись файла записей каталога для проекта RomScout.

Файл пишется один раз, целиком, после сбора всех метаданных.
"""
import json
import os
from pathlib import Path
from typing import Iterable

from rom_scout.aggregator import RomRecord


def render_json(records: Iterable[RomRecord], output_path: Path | str) -> Path:
    """
    Сохраняет записи в виде JSON-массива по указанному пути.

    :param records: записи RomRecord
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла

    Пример:
    ```python
    from rom_scout.report.json_report import render_json
    path = render_json(report.records, 'output/roms.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [record.to_dict() for record in records]

    # читатель видит либо прежний файл, либо новый целиком
    tmp = output.with_name(output.name + ".part")
    try:
        with tmp.open('w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, output)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise

    return output
