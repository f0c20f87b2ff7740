"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Promotion-aware price resolution over already-fetched product data.
"""

from .discounts import DiscountSummary, has_price_list_discount, summarize_discounts
from .formatting import DEFAULT_CURRENCY_SUFFIX, format_amount
from .models import (
    ApplicationMethod,
    CalculatedPrice,
    PriceQuote,
    PriceVariant,
    Product,
    Promotion,
    VariantPrice,
)
from .resolver import (
    PromotionDiscount,
    coerce_product,
    resolve_price,
    select_best_promotion,
    select_variant,
    undiscounted_quote,
    zero_quote,
)

__all__ = [
    "DiscountSummary",
    "has_price_list_discount",
    "summarize_discounts",
    "DEFAULT_CURRENCY_SUFFIX",
    "format_amount",
    "ApplicationMethod",
    "CalculatedPrice",
    "PriceQuote",
    "PriceVariant",
    "Product",
    "Promotion",
    "VariantPrice",
    "PromotionDiscount",
    "coerce_product",
    "resolve_price",
    "select_best_promotion",
    "select_variant",
    "undiscounted_quote",
    "zero_quote",
]
