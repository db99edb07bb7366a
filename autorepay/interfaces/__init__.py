"""Protocol interfaces for the vault's external collaborators."""
from .custody import AssetCustody
from .event_listener import EventListener
from .fee_sink import FeeSink
from .notifier import Notifier
from .price_feed import PriceFeed
from .state_store import StateStore
from .yield_market import YieldMarket

__all__ = [
    "AssetCustody",
    "EventListener",
    "FeeSink",
    "Notifier",
    "PriceFeed",
    "StateStore",
    "YieldMarket",
]
