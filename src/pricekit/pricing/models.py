"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Product, variant and promotion shapes consumed from the commerce backend.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _BackendModel(BaseModel):
    """Read-only, permissive view over backend JSON; non-finite amounts are rejected."""

    model_config = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)


class VariantPrice(_BackendModel):
    amount: float | None = None
    region_id: str | None = None
    currency_code: str | None = None

    def matches_region(self, region_id: str | None) -> bool:
        return region_id is None or self.region_id == region_id


class CalculatedPrice(_BackendModel):
    """Price pre-computed by backend price lists for one variant."""

    original_amount: float | None = None
    calculated_amount: float | None = None
    region_id: str | None = None

    @property
    def has_discount(self) -> bool:
        if self.original_amount is None or self.calculated_amount is None:
            return False
        return self.calculated_amount < self.original_amount


class PriceVariant(_BackendModel):
    id: str
    prices: list[VariantPrice] = Field(default_factory=list)
    calculated_price: CalculatedPrice | None = None

    @field_validator("prices", mode="before")
    @classmethod
    def _null_prices(cls, value: Any) -> Any:
        return [] if value is None else value

    def price_for_region(self, region_id: str | None) -> VariantPrice | None:
        """Return the first price matching `region_id` (any price when None)."""
        for price in self.prices:
            if price.matches_region(region_id):
                return price
        return None


class ApplicationMethod(_BackendModel):
    type: str | None = None
    value: float | None = None
    target_type: str | None = None
    allocation: str | None = None


class Promotion(_BackendModel):
    """
    Promotion attached to a product by the backend promotion module.

    Older payloads put `type`/`value` on the promotion itself instead of under
    `application_method`; both are read.
    """

    id: str | None = None
    code: str | None = None
    is_automatic: bool = False
    type: str | None = None
    value: float | None = None
    application_method: ApplicationMethod | None = None

    def discount_method(self) -> ApplicationMethod | None:
        if self.application_method is not None:
            return self.application_method
        if self.type and self.value is not None:
            return ApplicationMethod(type=self.type, value=self.value)
        return None


class Product(_BackendModel):
    id: str | None = None
    variants: list[PriceVariant] = Field(default_factory=list)
    promotions: list[Promotion] = Field(default_factory=list)
    has_promotions: bool | None = None

    @field_validator("variants", "promotions", mode="before")
    @classmethod
    def _null_lists(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def promotions_enabled(self) -> bool:
        if self.has_promotions is False:
            return False
        return bool(self.promotions)


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """
    Display-ready price for one variant.

    Attributes:
        original_price: Formatted price before any discount.
        promotional_price: Formatted price after the applied discount.
        discount_percentage: Whole percent in 0..100; 0 iff no promotion.
        has_promotion: Whether a discount was applied.
        original_amount: Numeric counterpart of `original_price`.
        promotional_amount: Numeric counterpart of `promotional_price`.
    """

    original_price: str
    promotional_price: str
    discount_percentage: int
    has_promotion: bool
    original_amount: float = 0.0
    promotional_amount: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
