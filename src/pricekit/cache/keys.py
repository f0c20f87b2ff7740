"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache key construction helpers.
"""

from __future__ import annotations


def create_cache_key(prefix: str, *parts: str | int | float | None) -> str:
    """Join `prefix` and the `parts` with colons; `None` and `""` parts are dropped."""
    kept = [str(part) for part in parts if part is not None and part != ""]
    return f"{prefix}:{':'.join(kept)}"
