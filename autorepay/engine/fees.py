"""Deposit fee skim, routed to the fee sink."""
from __future__ import annotations

import logging

from ..errors import FeeRoutingFailure
from ..interfaces.fee_sink import FeeSink

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000


class FeeRouter:
    """Compute the skim on a deposit and forward it to the fee sink."""

    def __init__(self, sink: FeeSink, fee_bps: int) -> None:
        if not 0 <= fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be within [0, {BPS_DENOMINATOR}): {fee_bps}")
        self._sink = sink
        self.fee_bps = fee_bps

    def split(self, amount: int) -> tuple[int, int]:
        """Return ``(fee, net)``; ``fee + net == amount`` always."""
        fee = amount * self.fee_bps // BPS_DENOMINATOR
        return fee, amount - fee

    async def route(self, fee: int) -> None:
        if fee == 0:
            return
        try:
            await self._sink.deposit_fee(fee)
        except Exception as e:
            raise FeeRoutingFailure(fee, str(e)) from e
        logger.debug("Routed fee of %d to fee sink", fee)
