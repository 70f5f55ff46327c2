from __future__ import annotations

import asyncio

import pytest

from mockup_engine.errors import ConfigurationError, MalformedResponseError
from mockup_engine.retry import RetryPolicy, is_transient_error, retry


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FlakyOperation:
    def __init__(self, failures: int, error: Exception) -> None:
        self.failures = failures
        self.error = error
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "ok"


class StatusError(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__("request failed")
        self.status_code = status_code


def test_transient_failures_exhaust_after_three_attempts() -> None:
    sleeper = SleepRecorder()
    policy = RetryPolicy(max_attempts=3, base_delay_ms=100, sleep=sleeper)
    operation = FlakyOperation(failures=10, error=RuntimeError("503 UNAVAILABLE"))

    with pytest.raises(RuntimeError, match="503"):
        asyncio.run(policy.run(operation))

    assert operation.calls == 3
    assert sleeper.delays == [0.1, 0.2]
    assert sum(sleeper.delays) == pytest.approx(0.3)


def test_recovers_after_transient_failure() -> None:
    sleeper = SleepRecorder()
    policy = RetryPolicy(max_attempts=3, base_delay_ms=100, sleep=sleeper)
    operation = FlakyOperation(failures=1, error=RuntimeError("The model is overloaded"))

    assert asyncio.run(policy.run(operation)) == "ok"
    assert operation.calls == 2
    assert sleeper.delays == [0.1]


def test_terminal_error_is_not_retried() -> None:
    sleeper = SleepRecorder()
    policy = RetryPolicy(sleep=sleeper)
    operation = FlakyOperation(failures=1, error=ValueError("400 invalid argument"))

    with pytest.raises(ValueError):
        asyncio.run(policy.run(operation))

    assert operation.calls == 1
    assert sleeper.delays == []


def test_configuration_error_is_not_retried() -> None:
    sleeper = SleepRecorder()
    policy = RetryPolicy(sleep=sleeper)
    operation = FlakyOperation(failures=1, error=ConfigurationError("API key not found"))

    with pytest.raises(ConfigurationError):
        asyncio.run(policy.run(operation))

    assert operation.calls == 1
    assert sleeper.delays == []


def test_on_retry_hook_sees_each_backoff() -> None:
    seen: list[tuple[int, int, int]] = []
    policy = RetryPolicy(
        max_attempts=3,
        base_delay_ms=2000,
        sleep=SleepRecorder(),
        on_retry=lambda attempt, attempts, delay_ms, exc: seen.append((attempt, attempts, delay_ms)),
    )
    operation = FlakyOperation(failures=2, error=RuntimeError("429 Too Many Requests"))

    assert asyncio.run(policy.run(operation)) == "ok"
    assert seen == [(1, 3, 2000), (2, 3, 4000)]


def test_timeout_counts_as_transient() -> None:
    sleeper = SleepRecorder()
    calls = {"count": 0}

    async def slow_then_fast() -> str:
        calls["count"] += 1
        if calls["count"] == 1:
            await asyncio.sleep(1.0)
        return "done"

    policy = RetryPolicy(max_attempts=2, base_delay_ms=10, timeout_s=0.01, sleep=sleeper)
    assert asyncio.run(policy.run(slow_then_fast)) == "done"
    assert calls["count"] == 2
    assert sleeper.delays == [0.01]


def test_retry_function_uses_defaults() -> None:
    sleeper = SleepRecorder()
    operation = FlakyOperation(failures=2, error=RuntimeError("RESOURCE_EXHAUSTED"))

    assert asyncio.run(retry(operation, sleep=sleeper)) == "ok"
    assert sleeper.delays == [2.0, 4.0]


def test_retry_function_backs_off_from_given_base_delay() -> None:
    sleeper = SleepRecorder()
    operation = FlakyOperation(failures=2, error=RuntimeError("503 UNAVAILABLE"))

    assert asyncio.run(retry(operation, 3, 100, sleep=sleeper)) == "ok"
    assert operation.calls == 3
    assert sleeper.delays == [0.1, 0.2]


def test_is_transient_error_classification() -> None:
    assert is_transient_error(RuntimeError("503 Service Unavailable"))
    assert is_transient_error(RuntimeError("rate limit exceeded"))
    assert is_transient_error(StatusError(429))
    assert is_transient_error(TimeoutError())
    assert not is_transient_error(StatusError(400))
    assert not is_transient_error(RuntimeError("safety block"))
    assert not is_transient_error(MalformedResponseError("503 in the body but not JSON"))
    assert not is_transient_error(ConfigurationError("missing key"))
