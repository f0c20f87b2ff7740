"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Volatile key classification.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

DEFAULT_VOLATILE_PATTERNS: tuple[str, ...] = (
    "inventory",
    "stock",
    "price",
    "cart:",
    "payment",
    "checkout",
    "products:",
    "customer",
)


class KeyClassifier(Protocol):
    """Predicate deciding whether a key must never be memoized."""

    def __call__(self, key: str) -> bool: ...


class VolatileKeyClassifier:
    """
    Substring-based volatile key predicate.

    A key is volatile when it contains any configured pattern. Volatile keys
    still share in-flight producers but are never served from memo.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_VOLATILE_PATTERNS) -> None:
        cleaned = tuple(p for p in patterns if p)
        self.patterns = cleaned

    def __call__(self, key: str) -> bool:
        return any(pattern in key for pattern in self.patterns)

    def extend(self, *patterns: str) -> "VolatileKeyClassifier":
        """Return a new classifier with extra patterns appended."""
        return VolatileKeyClassifier((*self.patterns, *patterns))

    def __repr__(self) -> str:
        return f"VolatileKeyClassifier(patterns={self.patterns!r})"


def never_volatile(key: str) -> bool:
    _ = key
    return False
