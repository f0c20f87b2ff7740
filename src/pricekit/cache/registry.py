"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/registry.py.
"""

from __future__ import annotations

from .base import CacheStats
from .dedup import DeduplicatingCache

DEFAULT_CACHE_SIZES: dict[str, int] = {
    "cart": 30,
    "product": 100,
    "category": 50,
}


class CacheRegistryError(RuntimeError):
    """Raised when cache instance resolution fails."""


class CacheRegistry:
    """
    Named cache instances for one process or session.

    Built once at startup and passed to the components that need a cache;
    entries are only ever removed through explicit invalidation or `clear_all`.
    Tests construct their own registry instead of sharing one.
    """

    def __init__(self) -> None:
        self._caches: dict[str, DeduplicatingCache] = {}

    @classmethod
    def with_defaults(cls) -> "CacheRegistry":
        """Create a registry holding the `cart`, `product` and `category` caches."""
        registry = cls()
        for name, size in DEFAULT_CACHE_SIZES.items():
            registry.register(DeduplicatingCache(size, name=name))
        return registry

    def register(
        self,
        cache: DeduplicatingCache,
        *,
        overwrite: bool = False,
    ) -> None:
        """Register one cache by its `name`."""
        key = cache.name.strip().lower()
        if not key:
            raise CacheRegistryError("Cache name must be non-empty")
        if key in self._caches and not overwrite:
            raise CacheRegistryError(f"Cache already registered: {key}")
        self._caches[key] = cache

    def get(self, name: str) -> DeduplicatingCache:
        key = name.strip().lower()
        cache = self._caches.get(key)
        if cache is None:
            raise CacheRegistryError(f"Unknown cache '{name}'")
        return cache

    def names(self) -> list[str]:
        return sorted(self._caches)

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    def stats(self) -> dict[str, CacheStats]:
        return {name: self._caches[name].stats() for name in self.names()}
