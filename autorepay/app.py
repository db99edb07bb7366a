"""Builds the vault and its collaborators from config."""
from __future__ import annotations

import logging
from pathlib import Path

from .config import AppConfig, NotificationsConfig, PriceOracleConfig
from .engine import Vault
from .interfaces.notifier import Notifier
from .interfaces.price_feed import PriceFeed
from .notifications import EmailNotifier, NotificationDispatcher, TelegramNotifier
from .oracles import PriceOracleAdapter, PythPriceFeed, StaticPriceFeed
from .services import Keeper
from .simulation import SimulatedEnvironment
from .storage import JsonStateStore

logger = logging.getLogger(__name__)


def build_price_feed(config: PriceOracleConfig) -> PriceFeed:
    if config.provider == "pyth":
        return PythPriceFeed(config.pyth)
    if config.provider == "static":
        return StaticPriceFeed(config.static)
    raise ValueError(f"Unknown price provider '{config.provider}'")


def build_notifiers(config: NotificationsConfig) -> list[Notifier]:
    notifiers: list[Notifier] = []
    if config.telegram.enabled:
        notifiers.append(TelegramNotifier(config.telegram))
    if config.email.enabled:
        notifiers.append(EmailNotifier(config.email))
    return notifiers


class Application:
    """Vault backed by the simulated market, with both stores on disk.

    The simulated collaborators are saved next to the vault state as
    ``<state_path>.sim.json``.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        vault_cfg = config.vault

        state_path = Path(config.storage.state_path)
        self.store = JsonStateStore(state_path)
        self.sim_store = JsonStateStore(state_path.with_name(state_path.name + ".sim.json"))

        sim_snapshot = self.sim_store.load()
        if sim_snapshot is None:
            self.env = SimulatedEnvironment(vault_cfg.protocol_account, vault_cfg.asset)
        else:
            self.env = SimulatedEnvironment.from_dict(
                sim_snapshot, vault_cfg.protocol_account, vault_cfg.asset
            )

        self.notifiers = build_notifiers(config.notifications)
        oracle = PriceOracleAdapter(
            build_price_feed(config.price_oracle),
            max_age_seconds=config.price_oracle.max_age_seconds,
        )
        self.vault = Vault(
            vault_cfg,
            config.sweep,
            oracle=oracle,
            market=self.env.market,
            custody=self.env.custody,
            fee_sink=self.env.fee_vault,
            store=self.store,
            listeners=[
                NotificationDispatcher(
                    self.notifiers, vault_cfg.asset, vault_cfg.asset_decimals
                )
            ],
        )
        self.keeper = Keeper(
            self.vault.scheduler, config.sweep.keeper_poll_seconds, self.notifiers
        )

    def save_simulation(self) -> None:
        self.sim_store.save(self.env.to_dict())
        logger.debug("Simulation state saved to %s", self.sim_store.path)
