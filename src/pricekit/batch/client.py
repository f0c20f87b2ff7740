"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

HTTP client for the batched lowest-price endpoint.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from collections.abc import Callable, Sequence

from pydantic import ValidationError

from ..errors import PricingRequestError, PricingRetryableError, PricingValidationError
from ..runtime.contracts import RetryPolicy, TimeoutPolicy
from ..runtime.retry import RetryCallback, call_with_retry
from ..runtime.timeouts import await_with_timeout
from ..settings import PricingSettings
from .types import BatchLowestPricesRequest, BatchLowestPricesResponse, LowestPriceMap

logger = logging.getLogger("pricekit.batch.client")

LOWEST_PRICES_BATCH_PATH = "/store/variants/lowest-prices-batch"

PostFn = Callable[[str, bytes, dict[str, str], float | None], bytes]


class LowestPriceClient:
    """
    Fetch lowest-price records for many variants in one POST.

    Each attempt runs under the timeout policy; transient failures are retried
    with backoff, 4xx and malformed payloads fail immediately.
    """

    def __init__(
        self,
        settings: PricingSettings | None = None,
        *,
        post: PostFn | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout_policy: TimeoutPolicy | None = None,
        on_retry: RetryCallback | None = None,
    ) -> None:
        self.settings = settings or PricingSettings()
        self._post = post or self.http_post
        self._retry_policy = retry_policy or self.settings.retry_policy()
        self._timeout_policy = timeout_policy or self.settings.timeout_policy()
        self._on_retry = on_retry

    @property
    def url(self) -> str:
        return self.settings.backend_url.rstrip("/") + LOWEST_PRICES_BATCH_PATH

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.settings.publishable_key:
            headers["x-publishable-api-key"] = self.settings.publishable_key
        return headers

    async def fetch_lowest_prices(
        self,
        variant_ids: Sequence[str],
        *,
        currency_code: str,
        region_id: str | None = None,
        days: int = 30,
    ) -> LowestPriceMap:
        if not variant_ids:
            return {}
        try:
            request = BatchLowestPricesRequest(
                variant_ids=list(variant_ids),
                currency_code=currency_code,
                region_id=region_id,
                days=days,
            )
        except ValidationError as exc:
            raise PricingValidationError(f"Invalid lowest-price request: {exc}") from exc

        payload = json.dumps(request.to_payload()).encode("utf-8")
        headers = self._headers()
        timeout_s = self._timeout_policy.request_timeout_s

        async def _attempt() -> LowestPriceMap:
            body = await await_with_timeout(
                asyncio.to_thread(self._post, self.url, payload, headers, timeout_s),
                timeout_s,
            )
            return self._decode(body)

        return await call_with_retry(
            _attempt,
            policy=self._retry_policy,
            on_retry=self._on_retry,
        )

    def _decode(self, body: bytes) -> LowestPriceMap:
        try:
            decoded = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PricingValidationError(
                "Invalid JSON response from lowest-price endpoint"
            ) from exc
        if not isinstance(decoded, dict):
            raise PricingValidationError("Lowest-price response must be a JSON object")
        try:
            return BatchLowestPricesResponse.model_validate(decoded).to_map()
        except ValidationError as exc:
            raise PricingValidationError(
                f"Malformed lowest-price response: {exc}"
            ) from exc

    def http_post(
        self,
        url: str,
        payload: bytes,
        headers: dict[str, str],
        timeout_s: float | None,
    ) -> bytes:
        req = urllib.request.Request(url, data=payload, method="POST", headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=timeout_s) as resp:  # noqa: S310
                return resp.read()
        except urllib.error.HTTPError as e:
            body = ""
            try:
                body = e.read().decode("utf-8", errors="replace")
            except Exception:  # noqa: BLE001
                body = ""
            logger.error("Lowest-price request failed: HTTP %s %s", e.code, body)
            message = f"Failed to fetch batch lowest prices: HTTP {e.code} {body or e.reason}"
            if e.code >= 500 or e.code == 429:
                raise PricingRetryableError(message) from e
            raise PricingRequestError(message, status_code=e.code) from e
        except urllib.error.URLError as e:
            raise PricingRetryableError(
                f"Network error fetching batch lowest prices: {e.reason}"
            ) from e
