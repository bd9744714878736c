# rom_scout/__init__.py
"""
RomScout package initializer.
Defines package version; the CLI lives in :mod:`rom_scout.cli`.
"""
__version__ = "0.1.0"
