"""Wires the accounting engine to its collaborators."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable

from ..config import SweepConfig, VaultConfig
from ..interfaces.custody import AssetCustody
from ..interfaces.event_listener import EventListener
from ..interfaces.fee_sink import FeeSink
from ..interfaces.state_store import StateStore
from ..interfaces.yield_market import YieldMarket
from ..oracles.adapter import PriceOracleAdapter
from .accrual import YieldAccrualEngine
from .fees import FeeRouter
from .policy import CollateralPolicy
from .positions import PositionManager
from .state import VaultState
from .sweep import SweepScheduler

logger = logging.getLogger(__name__)


class Vault:
    """One parameterized engine; the fee skim is present only when a sink is given."""

    def __init__(
        self,
        config: VaultConfig,
        sweep_config: SweepConfig,
        oracle: PriceOracleAdapter,
        market: YieldMarket,
        custody: AssetCustody,
        fee_sink: FeeSink | None = None,
        store: StateStore | None = None,
        listeners: Iterable[EventListener] = (),
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.config = config
        self.state = VaultState()
        if store is not None:
            snapshot = store.load()
            if snapshot is not None:
                self.state.restore(snapshot)
                logger.info("Restored vault state with %d accounts", len(self.state.ledger))

        listeners = list(listeners)
        lock = asyncio.Lock()

        self.accrual = YieldAccrualEngine(self.state.ledger, clock)
        self.policy = CollateralPolicy(config.collateral_ratio_pct)
        self.fee_router = (
            FeeRouter(fee_sink, config.fee_bps)
            if config.fee_skim_enabled and fee_sink is not None
            else None
        )
        self.manager = PositionManager(
            state=self.state,
            accrual=self.accrual,
            policy=self.policy,
            oracle=oracle,
            market=market,
            custody=custody,
            asset=config.asset,
            protocol_account=config.protocol_account,
            fee_router=self.fee_router,
            store=store,
            listeners=listeners,
            lock=lock,
        )
        self.scheduler = SweepScheduler(
            state=self.state,
            accrual=self.accrual,
            oracle=oracle,
            market=market,
            update_interval=sweep_config.update_interval_seconds,
            store=store,
            listeners=listeners,
            lock=lock,
        )
