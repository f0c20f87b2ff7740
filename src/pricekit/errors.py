"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error hierarchy for pricing requests.
"""

from __future__ import annotations


class PricingError(RuntimeError):
    """Base pricekit error."""


class PricingRetryableError(PricingError):
    """Raised for transient failures (network, 5xx) that may succeed on retry."""


class PricingTimeoutError(PricingRetryableError):
    """Raised when a pricing request exceeds its timeout."""


class PricingRequestError(PricingError):
    """Raised when the backend rejects a request (4xx); never retried."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PricingValidationError(PricingRequestError):
    """Raised when a request or response payload has an invalid shape."""
