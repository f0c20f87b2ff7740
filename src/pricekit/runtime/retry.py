"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/retry.py.
"""

from __future__ import annotations

import asyncio
import logging
import socket
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..errors import (
    PricingError,
    PricingRequestError,
    PricingRetryableError,
    PricingTimeoutError,
)
from ..utils import backoff_delay
from .contracts import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("pricekit.runtime.retry")

RetryCallback = Callable[[int, PricingError], None]

_NON_RETRYABLE_PHRASES = (
    "400",
    "401",
    "403",
    "404",
    "422",
    "validation",
    "unauthorized",
    "forbidden",
)
_RETRYABLE_PHRASES = (
    "timeout",
    "fetch failed",
    "network",
    "econnreset",
    "enotfound",
    "econnrefused",
    "socket",
    "etimedout",
)


def classify_error(error: BaseException) -> PricingError:
    """Classify exceptions into retryable/non-retryable pricing errors."""
    if isinstance(error, PricingError):
        return error
    if isinstance(error, (asyncio.TimeoutError, TimeoutError, socket.timeout)):
        return PricingTimeoutError(str(error) or "Request timed out")
    if isinstance(error, (ConnectionError, OSError)):
        return PricingRetryableError(str(error))

    msg = str(error).lower()
    if any(token in msg for token in _NON_RETRYABLE_PHRASES):
        return PricingRequestError(str(error))
    if any(token in msg for token in _RETRYABLE_PHRASES):
        return PricingRetryableError(str(error))
    # Unknown failures are treated as transient.
    return PricingRetryableError(str(error))


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy | None = None,
    on_retry: RetryCallback | None = None,
) -> T:
    """Execute callable under bounded retry policy."""
    policy = policy or RetryPolicy()
    attempts = max(1, policy.max_attempts)
    last: PricingError | None = None
    for attempt in range(attempts):
        try:
            return await fn()
        except Exception as error:
            classified = classify_error(error)
            last = classified
            if not isinstance(classified, PricingRetryableError):
                logger.warning("Non-retryable error, failing immediately: %s", classified)
                raise classified from error
            if attempt + 1 >= attempts:
                logger.error(
                    "Request failed after %d attempts: %s", attempts, classified
                )
                raise classified from error

            if on_retry is not None:
                on_retry(attempt + 1, classified)
            delay = backoff_delay(attempt, policy.backoff_base_s, policy.backoff_jitter_s)
            logger.warning(
                "Attempt %d/%d failed, retrying in %.0fms: %s",
                attempt + 1,
                attempts,
                delay * 1000,
                classified,
            )
            await asyncio.sleep(delay)
    raise PricingError("Retry loop exhausted") from last
