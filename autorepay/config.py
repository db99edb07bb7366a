"""Configuration loader: config.yaml with ${VAR} interpolation from the environment and .env."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PRICE_PROVIDERS = ("pyth", "static")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VaultConfig:
    asset: str = "WETH"
    asset_decimals: int = 18
    protocol_account: str = "vault"
    collateral_ratio_pct: int = 150
    fee_bps: int = 3
    fee_skim_enabled: bool = True


@dataclass(frozen=True)
class SweepConfig:
    update_interval_seconds: int = 86400
    keeper_poll_seconds: int = 60


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    feed_id: str = ""
    timeout: int = 10


@dataclass(frozen=True)
class StaticPriceConfig:
    value: int = 0
    decimals: int = 8


@dataclass(frozen=True)
class PriceOracleConfig:
    provider: str = "pyth"
    max_age_seconds: int = 3600
    pyth: PythConfig = field(default_factory=PythConfig)
    static: StaticPriceConfig = field(default_factory=StaticPriceConfig)


@dataclass(frozen=True)
class StorageConfig:
    state_path: str = "vault_state.json"


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class EmailConfig:
    enabled: bool = False
    alert_email: str = ""
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender_email: str = ""
    sender_password: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    email: EmailConfig = field(default_factory=EmailConfig)


@dataclass(frozen=True)
class AppConfig:
    vault: VaultConfig = field(default_factory=VaultConfig)
    sweep: SweepConfig = field(default_factory=SweepConfig)
    price_oracle: PriceOracleConfig = field(default_factory=PriceOracleConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Substitute ${VAR} references in strings, recursing into dicts and lists.

    Unset variables become empty strings.
    """
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_vault(raw: dict[str, Any]) -> VaultConfig:
    return VaultConfig(
        asset=str(raw.get("asset", "WETH")),
        asset_decimals=int(raw.get("asset_decimals", 18)),
        protocol_account=str(raw.get("protocol_account", "vault")),
        collateral_ratio_pct=int(raw.get("collateral_ratio_pct", 150)),
        fee_bps=int(raw.get("fee_bps", 3)),
        fee_skim_enabled=bool(raw.get("fee_skim_enabled", True)),
    )


def _build_sweep(raw: dict[str, Any]) -> SweepConfig:
    return SweepConfig(
        update_interval_seconds=int(raw.get("update_interval_seconds", 86400)),
        keeper_poll_seconds=int(raw.get("keeper_poll_seconds", 60)),
    )


def _build_price_oracle(raw: dict[str, Any]) -> PriceOracleConfig:
    pyth_raw = raw.get("pyth", {})
    static_raw = raw.get("static", {})
    return PriceOracleConfig(
        provider=raw.get("provider", "pyth"),
        max_age_seconds=int(raw.get("max_age_seconds", 3600)),
        pyth=PythConfig(
            hermes_url=pyth_raw.get("hermes_url", PythConfig.hermes_url),
            feed_id=str(pyth_raw.get("feed_id", "")),
            timeout=int(pyth_raw.get("timeout", 10)),
        ),
        static=StaticPriceConfig(
            value=int(static_raw.get("value", 0)),
            decimals=int(static_raw.get("decimals", 8)),
        ),
    )


def _build_storage(raw: dict[str, Any]) -> StorageConfig:
    return StorageConfig(state_path=str(raw.get("state_path", "vault_state.json")))


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    em = raw.get("email", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
        email=EmailConfig(
            enabled=bool(em.get("enabled", False)),
            alert_email=em.get("alert_email", ""),
            smtp_server=em.get("smtp_server", "smtp.gmail.com"),
            smtp_port=int(em.get("smtp_port", 587)),
            sender_email=em.get("sender_email", ""),
            sender_password=em.get("sender_password", ""),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Read config.yaml (after loading .env), build AppConfig and validate it.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        vault=_build_vault(raw.get("vault", {})),
        sweep=_build_sweep(raw.get("sweep", {})),
        price_oracle=_build_price_oracle(raw.get("price_oracle", {})),
        storage=_build_storage(raw.get("storage", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise ValueError for settings the vault cannot run with."""
    if cfg.vault.collateral_ratio_pct <= 100:
        raise ValueError(
            f"collateral_ratio_pct must be above 100, got {cfg.vault.collateral_ratio_pct}"
        )
    if not 0 <= cfg.vault.fee_bps < 10_000:
        raise ValueError(f"fee_bps must be within [0, 10000), got {cfg.vault.fee_bps}")
    if not cfg.vault.protocol_account:
        raise ValueError("vault.protocol_account must not be empty")
    if cfg.sweep.update_interval_seconds <= 0:
        raise ValueError("sweep.update_interval_seconds must be positive")
    if cfg.sweep.keeper_poll_seconds <= 0:
        raise ValueError("sweep.keeper_poll_seconds must be positive")

    oracle = cfg.price_oracle
    if oracle.provider not in PRICE_PROVIDERS:
        raise ValueError(f"Unknown price provider '{oracle.provider}'")
    if oracle.provider == "pyth" and not oracle.pyth.feed_id:
        raise ValueError("price_oracle.pyth.feed_id is required for the pyth provider")
    if oracle.provider == "static" and oracle.static.value <= 0:
        raise ValueError("price_oracle.static.value must be positive")
