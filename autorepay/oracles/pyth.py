"""Pyth Network price feed."""
import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from ..models import PriceQuote

logger = logging.getLogger(__name__)


class PythPriceFeed:
    """Fetch the latest quote for one Pyth feed from the Hermes API."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.feed_id = config.feed_id
        self.timeout = config.timeout

    async def latest_price(self) -> PriceQuote:
        """Return the latest quote for the configured feed.

        HTTP errors and a response without the feed yield an invalid quote;
        network errors propagate to the caller.
        """
        url = f"{self.hermes_url}?ids[]={self.feed_id}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if response.status != 200:
                    logger.error(
                        "Error fetching price from Pyth: HTTP %s", response.status
                    )
                    return PriceQuote(value=0, decimals=0, is_valid=False)

                data = await response.json()

        for item in data.get("parsed", []):
            # Hermes returns ids without the 0x prefix
            if item.get("id", "").lower() != self.feed_id.lower().removeprefix("0x"):
                continue

            price_data = item.get("price", {})
            price_raw = int(price_data.get("price", 0))
            expo = int(price_data.get("expo", 0))
            publish_time = int(price_data.get("publish_time", 0))

            logger.debug(
                "Pyth quote %s: price=%d expo=%d publish_time=%d",
                self.feed_id, price_raw, expo, publish_time,
            )
            return PriceQuote(
                value=price_raw,
                decimals=-expo,
                is_valid=price_raw > 0,
                updated_at=publish_time,
            )

        logger.error("Pyth response did not contain feed %s", self.feed_id)
        return PriceQuote(value=0, decimals=0, is_valid=False)
