"""Sweep scheduler — periodic batch accrual across every registered account."""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from ..errors import ExternalMarketFailure
from ..interfaces.event_listener import EventListener
from ..interfaces.state_store import StateStore
from ..interfaces.yield_market import YieldMarket
from ..models import AccrualResult, SweepEvent, SweepResult
from ..oracles.adapter import PriceOracleAdapter
from .accrual import YieldAccrualEngine
from .calls import guarded, notify
from .state import VaultState
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SweepScheduler:
    """Expose ``is_due`` / ``run_sweep`` to an external keeper."""

    def __init__(
        self,
        state: VaultState,
        accrual: YieldAccrualEngine,
        oracle: PriceOracleAdapter,
        market: YieldMarket,
        update_interval: int,
        store: StateStore | None = None,
        listeners: Iterable[EventListener] = (),
        lock: asyncio.Lock | None = None,
    ) -> None:
        if update_interval <= 0:
            raise ValueError(f"update_interval must be positive: {update_interval}")
        self._state = state
        self._accrual = accrual
        self._oracle = oracle
        self._market = market
        self.update_interval = update_interval
        self._store = store
        self._listeners = list(listeners)
        self._lock = lock or asyncio.Lock()

    @property
    def global_last_update(self) -> int:
        return self._state.global_last_update

    def is_due(self) -> bool:
        return self._accrual.now() - self._state.global_last_update >= self.update_interval

    async def run_sweep(self) -> SweepResult:
        """Accrue every registered account as one unit; no-op when not due."""
        if not self.is_due():
            logger.debug("Sweep not due (last run at %d)", self._state.global_last_update)
            return SweepResult(ran=False)

        ledger = self._state.ledger

        async with self._lock:
            # another sweep may have completed while we waited
            if not self.is_due():
                return SweepResult(ran=False)

            now = self._accrual.now()
            price = await self._oracle.current_price()
            pooled = await guarded(
                self._market.pooled_balance(), ExternalMarketFailure, "pooled_balance"
            )

            staged: list[tuple[str, AccrualResult]] = [
                (account, self._accrual.apply(position, pooled, price, now))
                for account, position in ledger.positions()
            ]

            async with UnitOfWork(self._state, self._store):
                for account, result in staged:
                    ledger.put(account, result.position)
                self._state.global_last_update = now

        total = sum(result.yield_applied for _, result in staged)
        logger.info(
            "Sweep complete: %d accounts, %d USD of yield applied", len(staged), total
        )
        await notify(
            self._listeners,
            SweepEvent(accounts=len(staged), total_yield_applied=total, timestamp=now),
        )
        return SweepResult(
            ran=True, accounts=len(staged), total_yield_applied=total, timestamp=now
        )
