"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


DEFAULT_TTL_MS = 60_000.0


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One memoized producer result with its insertion time."""

    data: Any
    timestamp_ms: float


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Point-in-time snapshot of one cache instance."""

    cache_size: int
    pending_requests: int
    max_cache_size: int
    cache_keys: list[str] = field(default_factory=list)
    pending_keys: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cache_size": self.cache_size,
            "pending_requests": self.pending_requests,
            "max_cache_size": self.max_cache_size,
            "cache_keys": list(self.cache_keys),
            "pending_keys": list(self.pending_keys),
        }
