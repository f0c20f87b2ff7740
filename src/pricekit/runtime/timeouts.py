"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/timeouts.py.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ..errors import PricingTimeoutError

T = TypeVar("T")


async def await_with_timeout(awaitable: Awaitable[T], timeout_s: float | None) -> T:
    """Await value with optional timeout."""
    if timeout_s is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise PricingTimeoutError(
            f"Request timeout after {int(timeout_s * 1000)}ms"
        ) from exc
