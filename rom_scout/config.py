"""
Модуль для загрузки и валидации конфигурации краулера RomScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода каталога."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    base_url: HttpUrl = Field(
        "https://www.consoleroms.com",
        description="Базовый origin, относительно которого разрешаются относительные URL.",
    )
    emulators: list[str] = Field(default_factory=lambda: ["nes"], min_length=1, description="Разделы каталога.")
    output_dir: Path = Field(Path("output"), description="Корень для кэша, записей и файлов.")
    concurrency: int = Field(50, ge=1, description="Максимум одновременных сетевых операций.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на одну попытку запроса (секунд).")
    retries: int = Field(15, ge=1, description="Общее число попыток на один запрос.")
    user_agent: str = Field("RomScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    progress: bool = Field(True, description="Показывать прогресс-бары.")

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @property
    def base_origin(self) -> str:
        return str(self.base_url).rstrip("/")

    @property
    def cache_dir(self) -> Path:
        return self.output_dir / "tmp"

    @property
    def thumbs_dir(self) -> Path:
        return self.output_dir / "thumbs"

    @property
    def images_dir(self) -> Path:
        return self.output_dir / "images"

    @property
    def roms_dir(self) -> Path:
        return self.output_dir / "roms"

    @property
    def records_path(self) -> Path:
        return self.output_dir / "roms.json"


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути использует configs/default.yaml, а если его нет, значения по умолчанию.
    Для явно указанного, но отсутствующего файла бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise
