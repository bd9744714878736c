# rom_scout/crawler/pool.py
"""
Bounded worker pool: admission control for every network-bound batch.

Work items go into a queue that ``min(concurrency, len(items))`` workers
drain; finished results are published on a second queue and handed to the
caller in completion order. No more than ``concurrency`` units are ever in
flight, and a unit that raises still produces a result (``None``).
"""
from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, List, Optional, TypeVar

from rom_scout.logger import logger

__all__ = ("WorkerPool",)

I = TypeVar("I")
O = TypeVar("O")


class WorkerPool:
    """Runs async work units with at most *concurrency* of them at a time."""

    def __init__(self, concurrency: int) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency
        self.in_flight = 0
        self.peak = 0

    async def imap(
        self, func: Callable[[I], Awaitable[O]], items: Iterable[I]
    ) -> AsyncIterator[Optional[O]]:
        """Yield one result per item, as units complete."""
        queue: asyncio.Queue[I] = asyncio.Queue()
        for item in items:
            queue.put_nowait(item)
        total = queue.qsize()
        if not total:
            return
        results: asyncio.Queue[Optional[O]] = asyncio.Queue()
        workers = [
            asyncio.create_task(self._worker(func, queue, results))
            for _ in range(min(self.concurrency, total))
        ]
        try:
            for _ in range(total):
                yield await results.get()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)

    async def run(
        self,
        func: Callable[[I], Awaitable[O]],
        items: Iterable[I],
        progress: Any = None,
    ) -> List[Optional[O]]:
        """Run every item through *func* and collect the results.

        *progress*, if given, is notified once per completed unit via
        ``advance(result)``.
        """
        collected: List[Optional[O]] = []
        async for result in self.imap(func, items):
            collected.append(result)
            if progress is not None:
                progress.advance(result)
        return collected

    async def _worker(
        self,
        func: Callable[[I], Awaitable[O]],
        queue: asyncio.Queue[I],
        results: asyncio.Queue[Optional[O]],
    ) -> None:
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
            try:
                result: Optional[O] = await func(item)
            except Exception:
                logger.exception("Work unit %r failed", item)
                result = None
            finally:
                self.in_flight -= 1
                queue.task_done()
            results.put_nowait(result)
