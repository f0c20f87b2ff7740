"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Wire shapes for the batched lowest-price endpoint.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LowestPriceRecord(BaseModel):
    """Historical price data for one variant."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    variant_id: str | None = None
    lowest_30d_amount: float | None = None
    current_amount: float | None = None

    def display_amount(self, fallback: float | None = None) -> float | None:
        """Lowest amount, else current amount, else `fallback` (zero counts as missing)."""
        return self.lowest_30d_amount or self.current_amount or fallback


LowestPriceMap = dict[str, LowestPriceRecord | None]


class BatchLowestPricesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    variant_ids: list[str] = Field(min_length=1)
    currency_code: str = Field(min_length=1)
    region_id: str | None = None
    days: int = Field(default=30, gt=0)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BatchLowestPricesResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: dict[str, LowestPriceRecord | None] = Field(default_factory=dict)

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_map(self) -> LowestPriceMap:
        out: LowestPriceMap = {}
        for variant_id, record in self.results.items():
            if record is not None and record.variant_id is None:
                record = record.model_copy(update={"variant_id": variant_id})
            out[variant_id] = record
        return out


class LowestPriceFetcher(Protocol):
    """Producer of lowest-price data for a set of variants (one network call)."""

    async def fetch_lowest_prices(
        self,
        variant_ids: Sequence[str],
        *,
        currency_code: str,
        region_id: str | None = None,
        days: int = 30,
    ) -> LowestPriceMap: ...
