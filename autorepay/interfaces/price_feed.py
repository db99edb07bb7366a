"""Price feed protocol — raw quote source."""
from typing import Protocol

from ..models import PriceQuote


class PriceFeed(Protocol):
    """Abstract interface for fetching the latest asset price."""

    async def latest_price(self) -> PriceQuote: ...
