from __future__ import annotations

import asyncio
import socket

import pytest

from pricekit.errors import (
    PricingError,
    PricingRequestError,
    PricingRetryableError,
    PricingTimeoutError,
    PricingValidationError,
)
from pricekit.runtime import RetryPolicy, await_with_timeout, call_with_retry, classify_error
from pricekit.utils import backoff_delay, round_half_up


def run_async(coro):
    return asyncio.run(coro)


_NO_WAIT = RetryPolicy(max_attempts=3, backoff_base_s=0.0, backoff_jitter_s=0.0)


class _Flaky:
    def __init__(self, errors, value="ok"):
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


def test_classify_error_taxonomy():
    assert isinstance(classify_error(asyncio.TimeoutError()), PricingTimeoutError)
    assert isinstance(classify_error(socket.timeout("slow")), PricingTimeoutError)
    assert isinstance(classify_error(ConnectionResetError("reset")), PricingRetryableError)
    assert isinstance(classify_error(RuntimeError("fetch failed")), PricingRetryableError)
    assert isinstance(classify_error(RuntimeError("HTTP 404 not found")), PricingRequestError)
    assert isinstance(classify_error(ValueError("validation failed")), PricingRequestError)
    assert isinstance(classify_error(RuntimeError("weird")), PricingRetryableError)

    original = PricingValidationError("bad payload")
    assert classify_error(original) is original


def test_retryable_errors_are_retried_until_success():
    fn = _Flaky([ConnectionResetError("econnreset"), RuntimeError("network down")])
    attempts: list[int] = []

    result = run_async(
        call_with_retry(
            fn,
            policy=_NO_WAIT,
            on_retry=lambda attempt, err: attempts.append(attempt),
        )
    )

    assert result == "ok"
    assert fn.calls == 3
    assert attempts == [1, 2]


def test_non_retryable_error_fails_immediately():
    fn = _Flaky([PricingRequestError("HTTP 422", status_code=422)])

    with pytest.raises(PricingRequestError) as info:
        run_async(call_with_retry(fn, policy=_NO_WAIT))

    assert info.value.status_code == 422
    assert fn.calls == 1


def test_attempts_are_bounded():
    fn = _Flaky([PricingRetryableError("503")] * 5)

    with pytest.raises(PricingRetryableError):
        run_async(call_with_retry(fn, policy=_NO_WAIT))

    assert fn.calls == 3


def test_await_with_timeout_raises_pricing_timeout():
    async def slow():
        await asyncio.sleep(1)

    with pytest.raises(PricingTimeoutError, match="timeout"):
        run_async(await_with_timeout(slow(), 0.01))

    assert run_async(await_with_timeout(asyncio.sleep(0, result=5), None)) == 5


def test_backoff_delay_is_exponential_with_bounded_jitter():
    assert backoff_delay(0, 1.0, 0.0) == 1.0
    assert backoff_delay(2, 1.0, 0.0) == 4.0
    for _ in range(20):
        assert 0.5 <= backoff_delay(0, 0.5, 1.0) <= 1.5


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(33.335, 2) == 33.34


def test_timeout_error_is_retryable_pricing_error():
    assert issubclass(PricingTimeoutError, PricingRetryableError)
    assert issubclass(PricingValidationError, PricingRequestError)
    assert issubclass(PricingRequestError, PricingError)
