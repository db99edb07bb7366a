"""Fixed-quote price feed for local runs."""
import time

from ..config import StaticPriceConfig
from ..models import PriceQuote


class StaticPriceFeed:
    """Always returns the configured quote, stamped with the current time."""

    def __init__(self, config: StaticPriceConfig) -> None:
        self.value = config.value
        self.decimals = config.decimals

    async def latest_price(self) -> PriceQuote:
        return PriceQuote(
            value=self.value,
            decimals=self.decimals,
            is_valid=self.value > 0,
            updated_at=int(time.time()),
        )
