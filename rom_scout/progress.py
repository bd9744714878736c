# rom_scout/progress.py
"""Progress bars for pipeline batches (tqdm, rendered on stderr)."""
from __future__ import annotations

import sys
from typing import Callable, Generic, Optional, TypeVar

from tqdm import tqdm

from rom_scout.logger import logger

__all__ = ("ProgressReporter",)

T = TypeVar("T")

_BAR_FORMAT = "{bar} {percentage:3.0f}% | {n_fmt} of {total_fmt} | {desc}"


class ProgressReporter(Generic[T]):
    """Counts completed units and shows ``label(value)`` for the latest one.

    Observing only: nothing here feeds back into scheduling.
    """

    def __init__(
        self,
        total: int,
        label: Callable[[T], str],
        *,
        desc: str = "Processing...",
        enabled: bool = True,
    ) -> None:
        self.total = total
        self.label = label
        self.count = 0
        self._bar: Optional[tqdm] = tqdm(
            total=total,
            desc=desc,
            bar_format=_BAR_FORMAT,
            file=sys.stderr,
            disable=not enabled,
            leave=True,
        )

    def advance(self, value: T) -> None:
        self.count += 1
        if self._bar is None:
            return
        try:
            self._bar.set_description_str(self.label(value), refresh=False)
        except Exception as exc:
            logger.warning("Progress label failed for %r: %r", value, exc)
        self._bar.update(1)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def __enter__(self) -> ProgressReporter[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
