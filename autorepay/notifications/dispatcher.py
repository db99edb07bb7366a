"""Turns committed vault events into notifier messages."""
from __future__ import annotations

import logging
from typing import Iterable

from ..interfaces.notifier import Notifier
from ..models import DepositEvent, PositionEvent, SweepEvent, WithdrawalEvent
from ..units import format_units

logger = logging.getLogger(__name__)


def format_event(event: PositionEvent, asset: str = "WETH", asset_decimals: int = 18) -> str:
    if isinstance(event, DepositEvent):
        return (
            f"Deposit · {event.account}\n"
            f"Amount: {format_units(event.amount, asset_decimals)} {asset}"
            f" (net {format_units(event.net_amount, asset_decimals)},"
            f" fee {format_units(event.fee, asset_decimals)})\n"
            f"Debt ceiling: ${format_units(event.borrowed_amount, 18, 2)}"
        )
    if isinstance(event, WithdrawalEvent):
        return (
            f"Withdrawal · {event.account}\n"
            f"Amount: {format_units(event.amount, asset_decimals)} {asset}\n"
            f"Yield applied: ${format_units(event.yield_applied, 18, 2)}"
        )
    if isinstance(event, SweepEvent):
        return (
            f"Sweep · {event.accounts} accounts\n"
            f"Yield applied: ${format_units(event.total_yield_applied, 18, 2)}"
        )
    raise TypeError(f"Unknown event type: {type(event).__name__}")


class NotificationDispatcher:
    """Event listener forwarding formatted events to every notifier."""

    def __init__(
        self,
        notifiers: Iterable[Notifier],
        asset: str = "WETH",
        asset_decimals: int = 18,
    ) -> None:
        self._notifiers = list(notifiers)
        self._asset = asset
        self._asset_decimals = asset_decimals

    async def on_event(self, event: PositionEvent) -> None:
        message = format_event(event, self._asset, self._asset_decimals)
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=True)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)
