# cli.py

"""
Запуск RomScout из корня репозитория без установки пакета.

Пример запуска:
    python cli.py --config configs/default.yaml crawl --emulator nes
"""
from rom_scout.cli import cli


if __name__ == '__main__':
    cli()
