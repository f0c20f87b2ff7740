"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .base import DEFAULT_TTL_MS, CacheEntry, CacheStats
from .classifier import (
    DEFAULT_VOLATILE_PATTERNS,
    KeyClassifier,
    VolatileKeyClassifier,
    never_volatile,
)
from .dedup import DeduplicatingCache, invalidate_after_cart_change
from .keys import create_cache_key
from .registry import DEFAULT_CACHE_SIZES, CacheRegistry, CacheRegistryError

__all__ = [
    "DEFAULT_TTL_MS",
    "CacheEntry",
    "CacheStats",
    "DEFAULT_VOLATILE_PATTERNS",
    "KeyClassifier",
    "VolatileKeyClassifier",
    "never_volatile",
    "DeduplicatingCache",
    "invalidate_after_cart_change",
    "create_cache_key",
    "DEFAULT_CACHE_SIZES",
    "CacheRegistry",
    "CacheRegistryError",
]
