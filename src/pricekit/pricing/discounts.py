"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Discount presence checks used for badges and listing filters.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .models import Product
from .resolver import coerce_product


@dataclass(frozen=True, slots=True)
class DiscountSummary:
    """Which discount sources apply to a product."""

    has_promotion: bool = False
    has_calculated_price: bool = False
    has_any_discount: bool = False


def has_price_list_discount(product: Product | Mapping[str, Any] | Any) -> bool:
    """True when any variant carries a price-list discount."""
    parsed = coerce_product(product)
    if parsed is None:
        return False
    return any(
        variant.calculated_price is not None and variant.calculated_price.has_discount
        for variant in parsed.variants
    )


def summarize_discounts(product: Product | Mapping[str, Any] | Any) -> DiscountSummary:
    parsed = coerce_product(product)
    if parsed is None:
        return DiscountSummary()
    has_promotion = parsed.promotions_enabled
    has_calculated_price = has_price_list_discount(parsed)
    return DiscountSummary(
        has_promotion=has_promotion,
        has_calculated_price=has_calculated_price,
        has_any_discount=has_promotion or has_calculated_price,
    )
