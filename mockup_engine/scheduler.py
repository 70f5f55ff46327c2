"""Staggered release of batch jobs."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from .retry import SleepFn

T = TypeVar("T")

DEFAULT_STAGGER_MS = 2500


@dataclass
class StaggerScheduler:
    """Delay queue: job ``i`` starts ``i * interval_ms`` after the batch starts.

    All jobs of a batch are expected to call :meth:`wait_turn` at the same
    moment, so the per-index delays are measured from a common origin and
    dispatch order follows index order.
    """

    interval_ms: int = DEFAULT_STAGGER_MS
    sleep: SleepFn = asyncio.sleep

    def delay_ms(self, index: int) -> int:
        return max(0, int(index)) * max(0, int(self.interval_ms))

    async def wait_turn(self, index: int) -> None:
        delay_ms = self.delay_ms(index)
        if delay_ms > 0:
            await self.sleep(delay_ms / 1000.0)

    async def run(self, index: int, job: Callable[[], Awaitable[T]]) -> T:
        await self.wait_turn(index)
        return await job()
