"""Price oracle adapter — normalizes raw feed quotes to WAD-scaled USD."""
from __future__ import annotations

import logging
import time
from typing import Callable

from ..errors import OracleUnavailable
from ..interfaces.price_feed import PriceFeed
from ..models import PriceQuote

logger = logging.getLogger(__name__)

TARGET_DECIMALS = 18


def rescale(quote: PriceQuote) -> int:
    """Rescale a quote's value to 18 fractional digits, truncating."""
    if quote.decimals <= TARGET_DECIMALS:
        return quote.value * 10 ** (TARGET_DECIMALS - quote.decimals)
    return quote.value // 10 ** (quote.decimals - TARGET_DECIMALS)


class PriceOracleAdapter:
    """Read the latest price from a feed, rejecting anything unusable.

    A ``max_age_seconds`` of 0 disables the staleness check.
    """

    def __init__(
        self,
        feed: PriceFeed,
        max_age_seconds: int = 0,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._feed = feed
        self._max_age_seconds = max_age_seconds
        self._clock = clock or (lambda: int(time.time()))

    async def current_price(self) -> int:
        try:
            quote = await self._feed.latest_price()
        except Exception as e:
            raise OracleUnavailable(f"feed call failed: {e}") from e

        if quote is None or not quote.is_valid:
            raise OracleUnavailable("feed returned an invalid quote")
        if quote.value <= 0:
            raise OracleUnavailable(f"non-positive price {quote.value}")

        if self._max_age_seconds and quote.updated_at:
            age = self._clock() - quote.updated_at
            if age > self._max_age_seconds:
                raise OracleUnavailable(
                    f"quote is stale ({age}s old, max {self._max_age_seconds}s)"
                )

        price = rescale(quote)
        if price <= 0:
            raise OracleUnavailable(f"price truncated to zero from {quote.value}")
        return price
