# === FILE: rom_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера RomScout через командную строку.

Команды:
  crawl     Обойти каталог, сохранить записи и скачать файлы
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --output-dir DIR    Корень для кэша, записей и файлов
  --emulator NAME     Раздел каталога (можно повторять)
  --concurrency INT   Максимум одновременных запросов
  --no-progress       Не показывать прогресс-бары
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию RomScout

Пример:
  rom_scout --log-level DEBUG crawl --emulator nes --emulator snes --output-dir output
"""
import asyncio
import sys
from pathlib import Path

import click

from rom_scout import __version__
from rom_scout.config import load_config
from rom_scout.engine import start_crawl
from rom_scout.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='RomScout, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд RomScout CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output-dir', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Корень для кэша, записей и файлов'
)
@click.option(
    '--emulator', '-e', 'emulators',
    multiple=True,
    help='Раздел каталога (можно повторять)'
)
@click.option(
    '--concurrency', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Максимум одновременных запросов'
)
@click.option(
    '--no-progress', is_flag=True,
    help='Не показывать прогресс-бары'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, output_dir, emulators, concurrency, no_progress, crawl_timeout):
    """Обойти каталог, сохранить записи и скачать файлы."""
    cfg = ctx.obj['config']
    overrides = {}
    if output_dir is not None:
        overrides['output_dir'] = output_dir
    if emulators:
        overrides['emulators'] = list(emulators)
    if concurrency is not None:
        overrides['concurrency'] = concurrency
    if no_progress:
        overrides['progress'] = False
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    click.echo(f'Starting crawl of {cfg.base_origin}')
    try:
        if crawl_timeout:
            report = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            report = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    click.echo(report.json(pretty=True))


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
