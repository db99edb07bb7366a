"""Yield accrual. Debt is only ever reduced here."""
from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable

from ..models import WAD, AccrualResult, Position
from .ledger import AccountLedger

logger = logging.getLogger(__name__)


class YieldAccrualEngine:
    """Apply yield earned on pooled collateral to an account's debt.

    Yield is inferred as the excess of the protocol-wide pooled balance
    over the account's own recorded collateral, converted to USD at the
    current price and capped at the outstanding debt.
    """

    def __init__(
        self, ledger: AccountLedger, clock: Callable[[], int] | None = None
    ) -> None:
        self._ledger = ledger
        self._clock = clock or (lambda: int(time.time()))

    def now(self) -> int:
        return self._clock()

    @staticmethod
    def apply(
        position: Position, pooled_balance: int, price: int, now: int
    ) -> AccrualResult:
        """Compute the accrued position without touching the ledger."""
        elapsed = now - position.last_updated
        if elapsed <= 0:
            # same instant, or the clock stepped backwards; keep the later stamp
            return AccrualResult(position, 0)
        if position.borrowed_amount == 0:
            return AccrualResult(replace(position, last_updated=now), 0)

        yield_in_principal = max(0, pooled_balance - position.collateral_amount)
        yield_usd = yield_in_principal * price // WAD
        applied = min(yield_usd, position.borrowed_amount)

        return AccrualResult(
            replace(
                position,
                borrowed_amount=position.borrowed_amount - applied,
                last_updated=now,
            ),
            applied,
        )

    def accrue(self, account: str, pooled_balance: int, price: int) -> int:
        """Accrue yield for ``account`` in place and return the USD applied."""
        result = self.apply(self._ledger.get(account), pooled_balance, price, self.now())
        self._ledger.put(account, result.position)
        if result.yield_applied:
            logger.debug("Applied %d USD of yield to %s", result.yield_applied, account)
        return result.yield_applied
