"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Effective price resolution for one product variant.

Price-list discounts (backend `calculated_price`) always win over promotion
module discounts; among promotions the largest percentage-equivalent discount
wins and the earliest promotion is kept on ties. Missing data never raises:
it degrades to the zero quote or the undiscounted quote.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..utils import round_half_up
from .formatting import DEFAULT_CURRENCY_SUFFIX, format_amount
from .models import CalculatedPrice, PriceQuote, PriceVariant, Product, Promotion

logger = logging.getLogger("pricekit.pricing")


@dataclass(frozen=True, slots=True)
class PromotionDiscount:
    """Winning promotion with its percentage-equivalent and absolute discount."""

    promotion: Promotion
    percentage: float
    amount: float


def zero_quote(currency_suffix: str = DEFAULT_CURRENCY_SUFFIX) -> PriceQuote:
    zero = format_amount(0, currency_suffix)
    return PriceQuote(
        original_price=zero,
        promotional_price=zero,
        discount_percentage=0,
        has_promotion=False,
    )


def undiscounted_quote(
    amount: float, currency_suffix: str = DEFAULT_CURRENCY_SUFFIX
) -> PriceQuote:
    formatted = format_amount(amount, currency_suffix)
    return PriceQuote(
        original_price=formatted,
        promotional_price=formatted,
        discount_percentage=0,
        has_promotion=False,
        original_amount=amount,
        promotional_amount=amount,
    )


def coerce_product(product: Product | Mapping[str, Any] | Any) -> Product | None:
    """Validate raw backend data into a `Product`; `None` when unusable."""
    if isinstance(product, Product):
        return product
    if product is None:
        return None
    try:
        if isinstance(product, Mapping):
            return Product.model_validate(dict(product))
        return Product.model_validate(product, from_attributes=True)
    except (ValidationError, TypeError) as exc:
        logger.debug("Unusable product payload, resolving to zero quote: %s", exc)
        return None


def select_variant(
    variants: Iterable[PriceVariant],
    region_id: str | None = None,
    variant_id: str | None = None,
) -> PriceVariant | None:
    """Pick `variant_id`, or the variant with the cheapest matching price."""
    if variant_id is not None:
        for variant in variants:
            if variant.id == variant_id:
                return variant
        return None

    cheapest: PriceVariant | None = None
    cheapest_amount = 0.0
    for variant in variants:
        price = variant.price_for_region(region_id)
        if price is None:
            if cheapest is None:
                # Priceless variants only stand in until a priced one shows up.
                cheapest = variant
            continue
        amount = price.amount or 0.0
        if (
            cheapest is None
            or cheapest.price_for_region(region_id) is None
            or amount < cheapest_amount
        ):
            cheapest = variant
            cheapest_amount = amount
    return cheapest


def select_best_promotion(
    promotions: Iterable[Promotion], base_amount: float
) -> PromotionDiscount | None:
    """Return the promotion with the strictly greatest equivalent percentage."""
    best: PromotionDiscount | None = None
    best_percentage = 0.0
    for promotion in promotions:
        method = promotion.discount_method()
        if method is None or method.value is None or method.value <= 0:
            continue
        kind = (method.type or "").strip().lower()

        if kind == "percentage":
            percentage = min(method.value, 100.0)
            if percentage > best_percentage:
                best_percentage = percentage
                best = PromotionDiscount(
                    promotion=promotion,
                    percentage=best_percentage,
                    amount=base_amount * best_percentage / 100,
                )
        elif kind == "fixed" and base_amount > 0:
            equivalent = min(method.value / base_amount * 100, 100.0)
            if equivalent > best_percentage:
                best_percentage = round_half_up(equivalent, 2)
                best = PromotionDiscount(
                    promotion=promotion,
                    percentage=best_percentage,
                    amount=min(method.value, base_amount),
                )
    return best


def _usable_price_list(
    calculated: CalculatedPrice | None, region_id: str | None
) -> CalculatedPrice | None:
    if calculated is None or not calculated.has_discount:
        return None
    if (calculated.original_amount or 0.0) <= 0:
        return None
    if (
        region_id is not None
        and calculated.region_id is not None
        and calculated.region_id != region_id
    ):
        return None
    return calculated


def _discounted_quote(
    original: float,
    promotional: float,
    percentage: float,
    currency_suffix: str,
) -> PriceQuote:
    whole = int(round_half_up(min(max(percentage, 0.0), 100.0)))
    if whole == 0:
        return undiscounted_quote(original, currency_suffix)
    promotional = min(max(0.0, promotional), original)
    return PriceQuote(
        original_price=format_amount(original, currency_suffix),
        promotional_price=format_amount(promotional, currency_suffix),
        discount_percentage=whole,
        has_promotion=True,
        original_amount=original,
        promotional_amount=promotional,
    )


def resolve_price(
    product: Product | Mapping[str, Any] | Any,
    region_id: str | None = None,
    variant_id: str | None = None,
    *,
    currency_suffix: str = DEFAULT_CURRENCY_SUFFIX,
) -> PriceQuote:
    """
    Compute the display price of one variant of `product`.

    Args:
        product: `Product` model or raw backend mapping.
        region_id: Region whose prices apply; any region when None.
        variant_id: Explicit variant; defaults to the cheapest in the region.
        currency_suffix: Marker appended to formatted amounts.

    Returns:
        A fresh `PriceQuote`. Never raises.
    """
    parsed = coerce_product(product)
    if parsed is None:
        return zero_quote(currency_suffix)

    variant = select_variant(parsed.variants, region_id, variant_id)
    if variant is None:
        if variant_id is not None:
            logger.debug("Variant %s not found on product %s", variant_id, parsed.id)
        return zero_quote(currency_suffix)

    base_price = variant.price_for_region(region_id)
    if base_price is None:
        return zero_quote(currency_suffix)
    base_amount = max(0.0, base_price.amount or 0.0)

    price_list = _usable_price_list(variant.calculated_price, region_id)
    if price_list is not None:
        original = price_list.original_amount or 0.0
        calculated = price_list.calculated_amount or 0.0
        return _discounted_quote(
            original,
            calculated,
            (original - calculated) / original * 100,
            currency_suffix,
        )

    if not parsed.promotions_enabled:
        return undiscounted_quote(base_amount, currency_suffix)

    best = select_best_promotion(parsed.promotions, base_amount)
    if best is None or best.amount <= 0:
        return undiscounted_quote(base_amount, currency_suffix)

    return _discounted_quote(
        base_amount,
        base_amount - best.amount,
        best.percentage,
        currency_suffix,
    )
