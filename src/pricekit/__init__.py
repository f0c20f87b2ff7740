"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Discount-aware price resolution and coordinated price fetching for storefronts.
"""

from .batch import (
    BatchPriceAggregator,
    BatchState,
    BatchWindow,
    LowestPriceClient,
    LowestPriceRecord,
)
from .cache import (
    CacheRegistry,
    DeduplicatingCache,
    VolatileKeyClassifier,
    create_cache_key,
    invalidate_after_cart_change,
)
from .errors import (
    PricingError,
    PricingRequestError,
    PricingRetryableError,
    PricingTimeoutError,
    PricingValidationError,
)
from .pricing import (
    PriceQuote,
    Product,
    Promotion,
    PriceVariant,
    resolve_price,
    summarize_discounts,
)
from .runtime import BatchPolicy, RetryPolicy, TimeoutPolicy
from .settings import PricingSettings

__all__ = [
    "BatchPriceAggregator",
    "BatchState",
    "BatchWindow",
    "LowestPriceClient",
    "LowestPriceRecord",
    "CacheRegistry",
    "DeduplicatingCache",
    "VolatileKeyClassifier",
    "create_cache_key",
    "invalidate_after_cart_change",
    "PricingError",
    "PricingRequestError",
    "PricingRetryableError",
    "PricingTimeoutError",
    "PricingValidationError",
    "PriceQuote",
    "Product",
    "Promotion",
    "PriceVariant",
    "resolve_price",
    "summarize_discounts",
    "BatchPolicy",
    "RetryPolicy",
    "TimeoutPolicy",
    "PricingSettings",
]
