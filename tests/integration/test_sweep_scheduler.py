"""Integration tests for the sweep scheduler."""
from __future__ import annotations

import pytest

from autorepay.engine import SweepScheduler, Vault
from autorepay.errors import ExternalMarketFailure, OracleUnavailable, PersistenceFailure
from autorepay.models import Position, SweepEvent
from autorepay.simulation import SimulatedEnvironment

from conftest import START_TIME, WAD, EventRecorder, FailingStore, FakeClock, FakePriceFeed

INTERVAL = 3600


async def _seed(vault: Vault, env: SimulatedEnvironment) -> None:
    await vault.manager.deposit("alice", 100 * WAD)
    await vault.manager.deposit("bob", 50 * WAD)


class TestIsDue:
    def test_due_on_fresh_vault(self, vault: Vault) -> None:
        assert vault.scheduler.is_due()

    @pytest.mark.asyncio
    async def test_not_due_until_interval_elapses(
        self, vault: Vault, clock: FakeClock
    ) -> None:
        await vault.scheduler.run_sweep()
        assert not vault.scheduler.is_due()
        clock.advance(INTERVAL - 1)
        assert not vault.scheduler.is_due()
        clock.advance(1)
        assert vault.scheduler.is_due()

    def test_rejects_non_positive_interval(self, vault: Vault) -> None:
        with pytest.raises(ValueError):
            SweepScheduler(
                vault.state, vault.accrual, oracle=None, market=None, update_interval=0  # type: ignore[arg-type]
            )


class TestRunSweep:
    @pytest.mark.asyncio
    async def test_not_due_is_noop(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock, feed: FakePriceFeed
    ) -> None:
        await vault.scheduler.run_sweep()
        calls = feed.calls
        clock.advance(10)

        result = await vault.scheduler.run_sweep()

        assert not result.ran
        assert feed.calls == calls
        assert vault.scheduler.global_last_update == START_TIME

    @pytest.mark.asyncio
    async def test_yield_applied_to_every_account(
        self,
        vault: Vault,
        env: SimulatedEnvironment,
        clock: FakeClock,
        recorder: EventRecorder,
    ) -> None:
        await _seed(vault, env)
        alice_debt = vault.manager.position("alice").borrowed_amount
        env.market.accrue_yield(WAD)
        clock.advance(INTERVAL)

        result = await vault.scheduler.run_sweep()

        # pooled - own collateral is what each account sees as its yield
        pooled = await env.market.pooled_balance()
        bob = vault.manager.position("bob")
        bob_yield = (pooled - bob.collateral_amount) * 2000
        alice_yield = (pooled - vault.manager.position("alice").collateral_amount) * 2000

        assert result.ran
        assert result.accounts == 2
        assert result.timestamp == START_TIME + INTERVAL
        assert vault.manager.position("alice").borrowed_amount == alice_debt - alice_yield
        assert bob.borrowed_amount == 0
        assert result.total_yield_applied == alice_yield + vault.policy.max_borrow(
            bob.collateral_amount, 2000 * WAD
        )
        assert bob_yield > 0
        assert vault.scheduler.global_last_update == START_TIME + INTERVAL
        assert recorder.events[-1] == SweepEvent(2, result.total_yield_applied, result.timestamp)

    @pytest.mark.asyncio
    async def test_position_with_no_debt_is_stamped(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock
    ) -> None:
        vault.state.ledger.register_if_new("carol")
        clock.advance(INTERVAL)

        await vault.scheduler.run_sweep()

        assert vault.manager.position("carol") == Position(0, 0, START_TIME + INTERVAL)

    @pytest.mark.asyncio
    async def test_oracle_failure_leaves_state_untouched(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock, feed: FakePriceFeed
    ) -> None:
        await _seed(vault, env)
        before = vault.state.to_dict()
        env.market.accrue_yield(WAD)
        clock.advance(INTERVAL)
        feed.is_valid = False

        with pytest.raises(OracleUnavailable):
            await vault.scheduler.run_sweep()

        assert vault.state.to_dict() == before
        assert vault.scheduler.is_due()

    @pytest.mark.asyncio
    async def test_market_failure_leaves_state_untouched(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock
    ) -> None:
        await _seed(vault, env)
        before = vault.state.to_dict()
        clock.advance(INTERVAL)
        env.market.fail("pooled_balance")

        with pytest.raises(ExternalMarketFailure):
            await vault.scheduler.run_sweep()

        assert vault.state.to_dict() == before

    @pytest.mark.asyncio
    async def test_store_failure_rolls_back_every_account(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock, store: FailingStore
    ) -> None:
        await _seed(vault, env)
        before = vault.state.to_dict()
        env.market.accrue_yield(10 * WAD)
        clock.advance(INTERVAL)
        store.failing = True

        with pytest.raises(PersistenceFailure):
            await vault.scheduler.run_sweep()

        assert vault.state.to_dict() == before
        assert store.load()["global_last_update"] == 0

    @pytest.mark.asyncio
    async def test_sweep_is_persisted(
        self, vault: Vault, env: SimulatedEnvironment, clock: FakeClock, store: FailingStore
    ) -> None:
        await _seed(vault, env)
        env.market.accrue_yield(10 * WAD)
        clock.advance(INTERVAL)

        await vault.scheduler.run_sweep()

        assert store.load() == vault.state.to_dict()
        assert store.load()["global_last_update"] == START_TIME + INTERVAL
