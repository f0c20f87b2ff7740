"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Pricing runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .runtime.contracts import BatchPolicy, RetryPolicy, TimeoutPolicy


def _env_first(*names: str, default: str) -> str:
    """Return the first non-empty environment variable in `names`."""
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


@dataclass(frozen=True, slots=True)
class PricingSettings:
    """Explicit settings used by the price client, aggregator and resolver."""

    backend_url: str = "http://localhost:9000"
    publishable_key: str | None = None

    timeout_s: float = 15.0
    max_attempts: int = 3
    backoff_base_s: float = 1.0
    backoff_jitter_s: float = 1.0

    batch_debounce_ms: float = 150.0
    batch_ttl_s: float = 900.0
    lowest_price_days: int = 30

    @staticmethod
    def from_env() -> "PricingSettings":
        """Load settings from `PRICEKIT_*` environment variables."""
        return PricingSettings(
            backend_url=_env_first(
                "PRICEKIT_BACKEND_URL",
                "MEDUSA_BACKEND_URL",
                default="http://localhost:9000",
            ).rstrip("/"),
            publishable_key=os.getenv("PRICEKIT_PUBLISHABLE_KEY") or None,
            timeout_s=float(_env_first("PRICEKIT_TIMEOUT_S", default="15")),
            max_attempts=int(_env_first("PRICEKIT_MAX_ATTEMPTS", default="3")),
            backoff_base_s=float(_env_first("PRICEKIT_BACKOFF_BASE_S", default="1.0")),
            backoff_jitter_s=float(
                _env_first("PRICEKIT_BACKOFF_JITTER_S", default="1.0")
            ),
            batch_debounce_ms=float(
                _env_first("PRICEKIT_BATCH_DEBOUNCE_MS", default="150")
            ),
            batch_ttl_s=float(_env_first("PRICEKIT_BATCH_TTL_S", default="900")),
            lowest_price_days=int(
                _env_first("PRICEKIT_LOWEST_PRICE_DAYS", default="30")
            ),
        )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff_base_s=self.backoff_base_s,
            backoff_jitter_s=self.backoff_jitter_s,
        )

    def timeout_policy(self) -> TimeoutPolicy:
        return TimeoutPolicy(request_timeout_s=self.timeout_s)

    def batch_policy(self) -> BatchPolicy:
        return BatchPolicy(
            debounce_s=self.batch_debounce_ms / 1000.0,
            ttl_s=self.batch_ttl_s,
            days=self.lowest_price_days,
        )
