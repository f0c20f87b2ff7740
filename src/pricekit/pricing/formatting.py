"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: pricing/formatting.py.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

DEFAULT_CURRENCY_SUFFIX = "zł"

_CENTS = Decimal("0.01")


def format_amount(amount: float, currency_suffix: str = DEFAULT_CURRENCY_SUFFIX) -> str:
    """Format an amount already in major units, e.g. ``80 -> "80.00 zł"``."""
    if not math.isfinite(amount):
        raise ValueError(f"Cannot format non-finite amount: {amount!r}")
    exact = Decimal(str(amount))
    with localcontext() as ctx:
        # Room for every integer digit plus the cents.
        ctx.prec = max(ctx.prec, exact.adjusted() + 3)
        value = exact.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if value == 0:
        value = abs(value)
    return f"{value} {currency_suffix}" if currency_suffix else str(value)
