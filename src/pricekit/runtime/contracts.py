"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for pricing requests.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Retry semantics for one request path."""

    max_attempts: int = 3
    backoff_base_s: float = 1.0
    backoff_jitter_s: float = 1.0


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """Timeout semantics for unary requests."""

    request_timeout_s: float | None = 15.0


@dataclass(frozen=True, slots=True)
class BatchPolicy:
    """
    Batch window controls for lowest-price aggregation.

    Attributes:
        debounce_s: Fixed window length measured from the first registration.
        ttl_s: How long a resolved batch stays memoized in the cache.
        days: Lookback window requested from the backend.
    """

    debounce_s: float = 0.15
    ttl_s: float = 900.0
    days: int = 30
