"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request deduplication with bounded, time-boxed memoization.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..utils import now_ms
from .base import DEFAULT_TTL_MS, CacheEntry, CacheStats
from .classifier import KeyClassifier, VolatileKeyClassifier

T = TypeVar("T")

logger = logging.getLogger("pricekit.cache")


class DeduplicatingCache:
    """
    Keyed store sharing one in-flight producer per key.

    Guarantees:
    - while a producer for a key runs, every caller awaits its single outcome;
    - a successful result is memoized for the caller-supplied TTL unless the
      key is volatile;
    - the pending record is removed when the producer finishes, success or
      failure, so no key stays stuck;
    - errors are never memoized and reach every waiter.

    All map mutation happens synchronously between awaits on one event loop,
    so no lock is taken. Guard with a mutex before sharing an instance across
    threads.
    """

    def __init__(
        self,
        max_size: int = 50,
        *,
        classifier: KeyClassifier | None = None,
        clock: Callable[[], float] | None = None,
        name: str = "default",
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self.name = name
        self.max_size = max_size
        self._is_volatile = classifier or VolatileKeyClassifier()
        self._clock = clock or now_ms
        self._entries: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Task[Any]] = {}

    def is_volatile(self, key: str) -> bool:
        return bool(self._is_volatile(key))

    async def execute(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl_ms: float = DEFAULT_TTL_MS,
    ) -> T:
        """Return a memoized, shared, or freshly produced value for `key`."""
        if not key:
            raise ValueError("Cache key must be non-empty")

        cached = self.get(key, ttl_ms)
        if cached is not None:
            logger.debug("Cache HIT for: %s", key)
            return cached.data

        pending = self._pending.get(key)
        if pending is not None:
            logger.debug("Deduplicating request for: %s", key)
        else:
            logger.debug("Fresh request for: %s", key)
            pending = asyncio.ensure_future(self._produce(key, producer))
            self._pending[key] = pending

        # Shielded so one waiter's cancellation does not cancel the shared producer.
        return await asyncio.shield(pending)

    async def _produce(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        task = asyncio.current_task()
        try:
            result = await producer()
        except BaseException:
            self._release(key, task)
            raise

        # An invalidated in-flight result is delivered but not memoized.
        if self._pending.get(key) is task:
            self.set(key, result)
        self._release(key, task)
        return result

    def _release(self, key: str, task: asyncio.Task[Any] | None) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    def get(self, key: str, ttl_ms: float = DEFAULT_TTL_MS) -> CacheEntry | None:
        """Return the live memoized entry for `key`, if any."""
        if self.is_volatile(key):
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp_ms >= ttl_ms:
            return None
        return entry

    def set(self, key: str, data: Any) -> None:
        """Memoize `data` under `key`; volatile keys are ignored."""
        if self.is_volatile(key):
            return
        if key not in self._entries:
            self._evict_if_needed()
        self._entries[key] = CacheEntry(data=data, timestamp_ms=self._clock())

    def _evict_if_needed(self) -> None:
        if len(self._entries) < self.max_size:
            return
        # min() keeps the first-inserted key on equal timestamps.
        oldest = min(self._entries, key=lambda k: self._entries[k].timestamp_ms)
        del self._entries[oldest]
        logger.debug("Evicted cache entry: %s", oldest)

    def invalidate(self, key: str) -> None:
        """Drop the memoized entry and pending record of exactly `key`."""
        self._entries.pop(key, None)
        self._pending.pop(key, None)
        logger.debug("Invalidated cache for: %s", key)

    def invalidate_pattern(self, pattern: str) -> int:
        """Drop every memoized and pending entry whose key contains `pattern`."""
        doomed = {key for key in self._entries if pattern in key}
        doomed.update(key for key in self._pending if pattern in key)
        for key in doomed:
            self._entries.pop(key, None)
            self._pending.pop(key, None)
        if doomed:
            logger.debug(
                "Invalidated %d cache entries matching: %s", len(doomed), pattern
            )
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
        self._pending.clear()
        logger.debug("Cleared all cache entries (%s)", self.name)

    def stats(self) -> CacheStats:
        return CacheStats(
            cache_size=len(self._entries),
            pending_requests=len(self._pending),
            max_cache_size=self.max_size,
            cache_keys=list(self._entries),
            pending_keys=list(self._pending),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Whether `key` holds a memoized entry of any age.

        Entries carry no TTL of their own; freshness is decided per call, so use
        `get(key, ttl_ms)` to ask whether `execute` would serve the entry.
        """
        return key in self._entries


def invalidate_after_cart_change(cache: DeduplicatingCache) -> int:
    """Force pricing, promotion and inventory data fresh after a cart mutation."""
    removed = 0
    for pattern in ("pricing", "promotions", "inventory"):
        removed += cache.invalidate_pattern(pattern)
    return removed
