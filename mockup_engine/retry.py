"""Bounded exponential-backoff retry for remote calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from .errors import ConfigurationError, MalformedResponseError

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[Any]]
RetryHook = Callable[[int, int, int, BaseException], None]

TRANSIENT_STATUS_CODES = frozenset({429, 503})
_TRANSIENT_MARKERS = (
    "503",
    "429",
    "unavailable",
    "overloaded",
    "rate limit",
    "rate-limit",
    "resource_exhausted",
    "too many requests",
)


def is_transient_error(exc: BaseException) -> bool:
    """Overload and rate-limit failures are worth another attempt; nothing else is."""
    if isinstance(exc, (ConfigurationError, MalformedResponseError)):
        return False
    if isinstance(exc, TimeoutError):
        return True
    for attr in ("code", "status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and value in TRANSIENT_STATUS_CODES:
            return True
    text = f"{type(exc).__name__} {exc}".lower()
    return any(marker in text for marker in _TRANSIENT_MARKERS)


@dataclass
class RetryPolicy:
    """Per-call retry; keeps no state between calls.

    Attempt ``i`` (0-based) that fails transiently is followed by a wait of
    ``base_delay_ms * 2**i`` before attempt ``i + 1``. Terminal errors and the
    error of the final attempt are re-raised unchanged.
    """

    max_attempts: int = 3
    base_delay_ms: int = 2000
    timeout_s: float | None = None
    sleep: SleepFn = asyncio.sleep
    on_retry: RetryHook | None = None
    classify: Callable[[BaseException], bool] = is_transient_error

    def delay_ms(self, attempt_index: int) -> int:
        return int(self.base_delay_ms) * (2 ** attempt_index)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        attempts = max(1, int(self.max_attempts))
        for attempt in range(attempts):
            try:
                return await self._attempt(operation)
            except Exception as exc:
                if attempt == attempts - 1 or not self.classify(exc):
                    raise
                delay_ms = self.delay_ms(attempt)
                if self.on_retry is not None:
                    self.on_retry(attempt + 1, attempts, delay_ms, exc)
                await self.sleep(delay_ms / 1000.0)
        raise RuntimeError("Max retries reached")

    async def _attempt(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self.timeout_s is None:
            return await operation()
        return await asyncio.wait_for(operation(), timeout=self.timeout_s)


async def retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 2000,
    *,
    sleep: SleepFn = asyncio.sleep,
    on_retry: RetryHook | None = None,
) -> T:
    policy = RetryPolicy(
        max_attempts=max_attempts,
        base_delay_ms=base_delay_ms,
        sleep=sleep,
        on_retry=on_retry,
    )
    return await policy.run(operation)
