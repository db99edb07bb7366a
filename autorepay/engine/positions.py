"""Position manager — deposit and withdraw orchestration."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Iterable

from ..errors import (
    CustodyFailure,
    ExternalMarketFailure,
    InsufficientCollateral,
    InvalidAmount,
)
from ..interfaces.custody import AssetCustody
from ..interfaces.event_listener import EventListener
from ..interfaces.state_store import StateStore
from ..interfaces.yield_market import YieldMarket
from ..models import DepositEvent, Position, WithdrawalEvent
from ..oracles.adapter import PriceOracleAdapter
from .accrual import YieldAccrualEngine
from .calls import guarded, notify
from .fees import FeeRouter
from .policy import CollateralPolicy
from .state import VaultState
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class PositionManager:
    """Single entry point for user-facing deposit and withdraw.

    Every debt mutation goes through :class:`YieldAccrualEngine` and
    :class:`CollateralPolicy`. The vault lock is held from the first
    price / pooled-balance read until the commit is persisted.
    """

    def __init__(
        self,
        state: VaultState,
        accrual: YieldAccrualEngine,
        policy: CollateralPolicy,
        oracle: PriceOracleAdapter,
        market: YieldMarket,
        custody: AssetCustody,
        asset: str,
        protocol_account: str,
        fee_router: FeeRouter | None = None,
        store: StateStore | None = None,
        listeners: Iterable[EventListener] = (),
        lock: asyncio.Lock | None = None,
    ) -> None:
        self._state = state
        self._accrual = accrual
        self._policy = policy
        self._oracle = oracle
        self._market = market
        self._custody = custody
        self._asset = asset
        self._protocol_account = protocol_account
        self._fee_router = fee_router
        self._store = store
        self._listeners = list(listeners)
        self._lock = lock or asyncio.Lock()

    @property
    def fees_collected(self) -> int:
        return self._state.fees_collected

    def position(self, account: str) -> Position:
        return self._state.ledger.get(account)

    def split_fee(self, amount: int) -> tuple[int, int]:
        if self._fee_router is None:
            return 0, amount
        return self._fee_router.split(amount)

    async def _pooled_balance(self) -> int:
        return await guarded(
            self._market.pooled_balance(), ExternalMarketFailure, "pooled_balance"
        )

    # ------------------------------------------------------------------
    # Deposit
    # ------------------------------------------------------------------

    async def deposit(self, account: str, amount: int) -> Position:
        """Lock ``amount`` of collateral for ``account`` and reset its debt ceiling."""
        if amount <= 0:
            raise InvalidAmount(amount)

        fee, net = self.split_fee(amount)
        ledger = self._state.ledger

        async with self._lock:
            price = await self._oracle.current_price()
            pooled = await self._pooled_balance()
            now = self._accrual.now()
            accrued = self._accrual.apply(ledger.get(account), pooled, price, now)

            fee_routed = 0

            async def refund() -> None:
                if fee_routed:
                    logger.warning(
                        "Fee of %d already routed for %s and cannot be recalled",
                        fee_routed, account,
                    )
                await self._custody.transfer_out(account, amount - fee_routed)

            async with UnitOfWork(self._state, self._store) as uow:
                await guarded(
                    self._custody.transfer_in(account, amount), CustodyFailure, "transfer_in"
                )
                uow.on_rollback(refund, "transfer_in")

                await guarded(
                    self._custody.approve(self._market.address, net),
                    CustodyFailure,
                    "approve",
                )
                await guarded(
                    self._market.supply(self._asset, net, self._protocol_account),
                    ExternalMarketFailure,
                    "supply",
                )
                uow.on_rollback(
                    lambda: self._market.withdraw(self._asset, net, self._protocol_account),
                    "supply",
                )

                if self._fee_router is not None and fee:
                    await self._fee_router.route(fee)
                    fee_routed = fee

                if ledger.register_if_new(account):
                    logger.info("Registered new account %s", account)

                collateral = accrued.position.collateral_amount + net
                position = Position(
                    collateral_amount=collateral,
                    borrowed_amount=self._policy.max_borrow(collateral, price),
                    last_updated=now,
                )
                ledger.put(account, position)
                self._state.fees_collected += fee

        logger.info(
            "Deposit %s: amount=%d net=%d fee=%d collateral=%d debt=%d",
            account, amount, net, fee, position.collateral_amount, position.borrowed_amount,
        )
        await notify(
            self._listeners,
            DepositEvent(
                account=account,
                amount=amount,
                net_amount=net,
                fee=fee,
                borrowed_amount=position.borrowed_amount,
                timestamp=now,
            ),
        )
        return position

    # ------------------------------------------------------------------
    # Withdraw
    # ------------------------------------------------------------------

    async def withdraw(self, account: str, amount: int) -> Position:
        """Release ``amount`` of collateral to ``account`` once its debt is cleared."""
        if amount <= 0:
            raise InvalidAmount(amount)

        ledger = self._state.ledger

        async with self._lock:
            price = await self._oracle.current_price()
            pooled = await self._pooled_balance()
            now = self._accrual.now()
            accrued = self._accrual.apply(ledger.get(account), pooled, price, now)

            available = accrued.position.collateral_amount
            if amount > available:
                raise InsufficientCollateral(account, amount, available)

            position = replace(accrued.position, collateral_amount=available - amount)
            self._policy.assert_withdrawable(account, position)

            async with UnitOfWork(self._state, self._store) as uow:
                received = await guarded(
                    self._market.withdraw(self._asset, amount, account),
                    ExternalMarketFailure,
                    "withdraw",
                )
                if received != amount:
                    logger.warning(
                        "Yield market returned %d for a withdrawal of %d", received, amount
                    )

                async def reclaim() -> None:
                    await self._custody.transfer_in(account, received)
                    await self._custody.approve(self._market.address, received)
                    await self._market.supply(self._asset, received, self._protocol_account)

                uow.on_rollback(reclaim, "withdraw")
                ledger.put(account, position)

        logger.info(
            "Withdrawal %s: amount=%d yield_applied=%d collateral=%d",
            account, amount, accrued.yield_applied, position.collateral_amount,
        )
        await notify(
            self._listeners,
            WithdrawalEvent(
                account=account,
                amount=amount,
                yield_applied=accrued.yield_applied,
                timestamp=now,
            ),
        )
        return position
