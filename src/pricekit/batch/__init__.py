"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Batched lowest-price fetching.

Quick start::

    from pricekit import BatchPriceAggregator, LowestPriceClient, PricingSettings

    client = LowestPriceClient(PricingSettings.from_env())
    aggregator = BatchPriceAggregator(client, currency_code="pln")
    record = await aggregator.lookup("variant_123")
"""

from .aggregator import BATCH_KEY_PREFIX, BatchPriceAggregator, BatchState, BatchWindow
from .client import LOWEST_PRICES_BATCH_PATH, LowestPriceClient
from .types import (
    BatchLowestPricesRequest,
    BatchLowestPricesResponse,
    LowestPriceFetcher,
    LowestPriceMap,
    LowestPriceRecord,
)

__all__ = [
    "BATCH_KEY_PREFIX",
    "BatchPriceAggregator",
    "BatchState",
    "BatchWindow",
    "LOWEST_PRICES_BATCH_PATH",
    "LowestPriceClient",
    "BatchLowestPricesRequest",
    "BatchLowestPricesResponse",
    "LowestPriceFetcher",
    "LowestPriceMap",
    "LowestPriceRecord",
]
