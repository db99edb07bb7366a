"""Shared test fixtures and fakes."""
from __future__ import annotations

import asyncio
import textwrap
from pathlib import Path

import pytest

from autorepay.config import (
    AppConfig,
    PriceOracleConfig,
    StaticPriceConfig,
    StorageConfig,
    SweepConfig,
    VaultConfig,
)
from autorepay.engine import Vault
from autorepay.models import PriceQuote
from autorepay.oracles import PriceOracleAdapter
from autorepay.simulation import SimulatedEnvironment
from autorepay.storage import MemoryStateStore

WAD = 10**18
START_TIME = 1_700_000_000
ETH_PRICE_FEED = 2000 * 10**8  # 8-decimal feed value for $2000


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    def __init__(self, start: int = START_TIME) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakePriceFeed:
    """Price feed whose quote and failure mode tests can change."""

    def __init__(self, value: int = ETH_PRICE_FEED, decimals: int = 8) -> None:
        self.value = value
        self.decimals = decimals
        self.is_valid = True
        self.updated_at = 0
        self.error: Exception | None = None
        self.calls = 0

    async def latest_price(self) -> PriceQuote:
        self.calls += 1
        # yield to the loop like a real network call would
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return PriceQuote(self.value, self.decimals, self.is_valid, self.updated_at)


class EventRecorder:
    def __init__(self) -> None:
        self.events: list = []

    async def on_event(self, event) -> None:
        self.events.append(event)


class FailingStore(MemoryStateStore):
    """Memory store whose saves fail while ``failing`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.failing = False

    def save(self, data) -> None:
        if self.failing:
            raise OSError("disk full")
        super().save(data)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def vault_config() -> VaultConfig:
    return VaultConfig(
        asset="WETH",
        asset_decimals=18,
        protocol_account="vault",
        collateral_ratio_pct=150,
        fee_bps=3,
        fee_skim_enabled=True,
    )


@pytest.fixture()
def sweep_config() -> SweepConfig:
    return SweepConfig(update_interval_seconds=3600, keeper_poll_seconds=1)


@pytest.fixture()
def sample_app_config(tmp_path: Path, vault_config: VaultConfig, sweep_config: SweepConfig) -> AppConfig:
    return AppConfig(
        vault=vault_config,
        sweep=sweep_config,
        price_oracle=PriceOracleConfig(
            provider="static",
            max_age_seconds=0,
            static=StaticPriceConfig(value=ETH_PRICE_FEED, decimals=8),
        ),
        storage=StorageConfig(state_path=str(tmp_path / "state.json")),
    )


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def feed() -> FakePriceFeed:
    return FakePriceFeed()


@pytest.fixture()
def env() -> SimulatedEnvironment:
    environment = SimulatedEnvironment("vault", "WETH")
    environment.fund("alice", 1_000 * WAD)
    environment.fund("bob", 1_000 * WAD)
    return environment


@pytest.fixture()
def store() -> FailingStore:
    return FailingStore()


@pytest.fixture()
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def vault(
    vault_config: VaultConfig,
    sweep_config: SweepConfig,
    feed: FakePriceFeed,
    env: SimulatedEnvironment,
    store: FailingStore,
    recorder: EventRecorder,
    clock: FakeClock,
) -> Vault:
    return Vault(
        vault_config,
        sweep_config,
        oracle=PriceOracleAdapter(feed, max_age_seconds=3600, clock=clock),
        market=env.market,
        custody=env.custody,
        fee_sink=env.fee_vault,
        store=store,
        listeners=[recorder],
        clock=clock,
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    vault:
      asset: WETH
      asset_decimals: 18
      protocol_account: vault
      collateral_ratio_pct: 150
      fee_bps: 3
    sweep:
      update_interval_seconds: 600
      keeper_poll_seconds: 30
    price_oracle:
      provider: pyth
      max_age_seconds: 120
      pyth:
        hermes_url: "https://hermes.example.com"
        feed_id: "ethfeed"
    storage:
      state_path: /tmp/vault_state.json
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
      email:
        enabled: false
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Factory for property tests (fresh objects per hypothesis example)
# ---------------------------------------------------------------------------


class VaultHarness:
    def __init__(self, vault_config: VaultConfig, sweep_config: SweepConfig) -> None:
        self.clock = FakeClock()
        self.feed = FakePriceFeed()
        self.env = SimulatedEnvironment("vault", "WETH")
        self.store = MemoryStateStore()
        self.vault = Vault(
            vault_config,
            sweep_config,
            oracle=PriceOracleAdapter(self.feed, clock=self.clock),
            market=self.env.market,
            custody=self.env.custody,
            fee_sink=self.env.fee_vault,
            store=self.store,
            clock=self.clock,
        )


@pytest.fixture()
def make_harness(vault_config: VaultConfig, sweep_config: SweepConfig):
    def _make() -> VaultHarness:
        return VaultHarness(vault_config, sweep_config)

    return _make
