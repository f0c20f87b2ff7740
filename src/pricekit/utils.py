"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Small shared helpers.
"""

from __future__ import annotations

import time
from decimal import ROUND_HALF_UP, Decimal, localcontext
from random import random


def now_ms() -> float:
    return time.monotonic() * 1000.0


def backoff_delay(attempt: int, base_s: float, jitter_s: float) -> float:
    """Exponential backoff for zero-based `attempt` plus uniform jitter."""
    base = 0.0 if base_s <= 0 else base_s * (2 ** max(0, attempt))
    jitter = random() * max(0.0, jitter_s)
    return max(0.0, base + jitter)


def round_half_up(value: float, places: int = 0) -> float:
    """Round away from the banker's rule, the way price labels are rounded."""
    quantum = Decimal(1).scaleb(-places)
    exact = Decimal(str(value))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 1)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))
