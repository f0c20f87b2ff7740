"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Batch aggregator that coalesces lowest-price registrations into one request.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from ..cache.dedup import DeduplicatingCache
from ..cache.keys import create_cache_key
from ..runtime.contracts import BatchPolicy
from .types import LowestPriceFetcher, LowestPriceMap, LowestPriceRecord

logger = logging.getLogger("pricekit.batch")

BATCH_KEY_PREFIX = "batch-lowest"


class BatchState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    DISPATCHING = "dispatching"
    RESOLVED = "resolved"
    FAILED = "failed"


class BatchWindow:
    """
    One debounce window of variant registrations.

    Moves `ACCUMULATING -> DISPATCHING -> RESOLVED | FAILED` exactly once.
    """

    def __init__(self, window_id: int) -> None:
        self.id = window_id
        self.state = BatchState.ACCUMULATING
        self.cache_key: str | None = None
        self.error: BaseException | None = None
        self._variant_ids: dict[str, None] = {}
        self._done = asyncio.Event()

    @property
    def variant_ids(self) -> list[str]:
        return list(self._variant_ids)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    async def wait(self) -> None:
        """Wait until the window resolved or failed; never raises the batch error."""
        await self._done.wait()

    def _add(self, variant_id: str) -> None:
        self._variant_ids[variant_id] = None

    def _discard(self, variant_id: str) -> None:
        self._variant_ids.pop(variant_id, None)

    def _finish(self, state: BatchState, error: BaseException | None = None) -> None:
        self.state = state
        self.error = error
        self._done.set()

    def __repr__(self) -> str:
        return (
            f"BatchWindow(id={self.id}, state={self.state.value}, "
            f"variant_ids={self.variant_ids!r})"
        )


class BatchPriceAggregator:
    """
    Coalesce independent "lowest price for this variant" registrations.

    The first registration opens a window and arms a fixed debounce timer;
    later registrations join the same window. When the timer fires the window
    ids are sorted into one cache key and fetched through
    `DeduplicatingCache.execute`, so identical sets requested from anywhere
    share one network call. Results are merged into a lookup shared by every
    registrant; requested ids missing from the response map to `None`.

    Must be used from within a running event loop.
    """

    def __init__(
        self,
        fetcher: LowestPriceFetcher,
        *,
        currency_code: str,
        region_id: str | None = None,
        cache: DeduplicatingCache | None = None,
        policy: BatchPolicy | None = None,
    ) -> None:
        if not currency_code:
            raise ValueError("currency_code must be non-empty")
        self._fetcher = fetcher
        self.currency_code = currency_code
        self.region_id = region_id
        self._cache = (
            cache if cache is not None else DeduplicatingCache(100, name="batch-prices")
        )
        self._policy = policy or BatchPolicy()

        self._lookup: LowestPriceMap = {}
        self._registered: dict[str, None] = {}
        self._current: BatchWindow | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._dispatching: dict[int, asyncio.Task[None]] = {}
        self._window_seq = 0
        self._error: str | None = None

    @property
    def cache(self) -> DeduplicatingCache:
        return self._cache

    @property
    def days(self) -> int:
        return self._policy.days

    @property
    def state(self) -> BatchState:
        if self._current is not None:
            return BatchState.ACCUMULATING
        if self._dispatching:
            return BatchState.DISPATCHING
        return BatchState.IDLE

    @property
    def loading(self) -> bool:
        return bool(self._dispatching)

    @property
    def error(self) -> str | None:
        """Message of the most recent failed batch, cleared on the next success."""
        return self._error

    @property
    def registered(self) -> list[str]:
        return list(self._registered)

    def cache_key_for(self, variant_ids: list[str]) -> str:
        return create_cache_key(
            BATCH_KEY_PREFIX,
            ",".join(sorted(variant_ids)),
            self.currency_code,
            self.region_id or "default",
            self.days,
        )

    def register(self, variant_id: str) -> BatchWindow:
        """Record interest in `variant_id` and return the window it joined."""
        if not variant_id:
            raise ValueError("variant_id must be non-empty")
        self._registered[variant_id] = None
        window = self._current or self._open_window()
        window._add(variant_id)
        return window

    def unregister(self, variant_id: str) -> None:
        """Drop interest; a window already dispatching is left alone."""
        self._registered.pop(variant_id, None)
        if self._current is not None:
            self._current._discard(variant_id)

    def get_price_data(self, variant_id: str) -> LowestPriceRecord | None:
        return self._lookup.get(variant_id)

    async def lookup(self, variant_id: str) -> LowestPriceRecord | None:
        """Register, wait for the window, and read the shared lookup."""
        window = self.register(variant_id)
        await window.wait()
        return self.get_price_data(variant_id)

    def refresh(self) -> BatchWindow | None:
        """Open (or join) a window covering every registered variant."""
        window: BatchWindow | None = None
        for variant_id in list(self._registered):
            window = self.register(variant_id)
        return window

    async def flush(self) -> None:
        """Dispatch the accumulating window now and wait for it."""
        window = self._current
        if window is None:
            return
        self._cancel_timer()
        self._dispatch(window)
        await window.wait()

    async def aclose(self) -> None:
        """Flush the open window and wait for every dispatching window."""
        await self.flush()
        pending = list(self._dispatching.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _open_window(self) -> BatchWindow:
        loop = asyncio.get_running_loop()
        self._window_seq += 1
        window = BatchWindow(self._window_seq)
        self._current = window
        self._timer = loop.call_later(self._policy.debounce_s, self._on_timer, window)
        logger.debug("Opened batch window %d", window.id)
        return window

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, window: BatchWindow) -> None:
        if self._current is not window:
            return
        self._timer = None
        self._dispatch(window)

    def _dispatch(self, window: BatchWindow) -> None:
        self._current = None
        if not window.variant_ids:
            window._finish(BatchState.RESOLVED)
            return
        window.state = BatchState.DISPATCHING
        task = asyncio.ensure_future(self._run_window(window))
        self._dispatching[window.id] = task

    async def _run_window(self, window: BatchWindow) -> None:
        try:
            await self._fetch_window(window)
        finally:
            self._dispatching.pop(window.id, None)
            if not window.done:
                window._finish(BatchState.FAILED, asyncio.CancelledError())

    async def _fetch_window(self, window: BatchWindow) -> None:
        variant_ids = sorted(window.variant_ids)
        key = self.cache_key_for(variant_ids)
        window.cache_key = key

        async def _produce() -> LowestPriceMap:
            return await self._fetcher.fetch_lowest_prices(
                variant_ids,
                currency_code=self.currency_code,
                region_id=self.region_id,
                days=self.days,
            )

        logger.debug("Dispatching batch window %d: %s", window.id, key)
        try:
            results = await self._cache.execute(
                key, _produce, ttl_ms=self._policy.ttl_s * 1000
            )
        except Exception as exc:
            self._error = str(exc) or exc.__class__.__name__
            logger.warning(
                "Batch lowest-price fetch failed for %d variants: %s",
                len(variant_ids),
                exc,
            )
            window._finish(BatchState.FAILED, exc)
            return

        for variant_id in variant_ids:
            self._lookup[variant_id] = (results or {}).get(variant_id)
        self._error = None
        window._finish(BatchState.RESOLVED)
