"""Vault data models. Everything here is a frozen dataclass."""
from __future__ import annotations

from dataclasses import dataclass

from .errors import LedgerInvariantError

WAD = 10**18


@dataclass(frozen=True)
class Position:
    """Per-account collateral and debt record.

    ``collateral_amount`` is in base units of the principal asset,
    ``borrowed_amount`` is USD scaled by ``WAD``.
    """

    collateral_amount: int = 0
    borrowed_amount: int = 0
    last_updated: int = 0

    def __post_init__(self) -> None:
        if self.collateral_amount < 0:
            raise LedgerInvariantError(
                f"collateral_amount cannot be negative: {self.collateral_amount}"
            )
        if self.borrowed_amount < 0:
            raise LedgerInvariantError(
                f"borrowed_amount cannot be negative: {self.borrowed_amount}"
            )

    @property
    def is_empty(self) -> bool:
        return self.collateral_amount == 0 and self.borrowed_amount == 0


@dataclass(frozen=True)
class PriceQuote:
    """Raw quote as returned by a price feed."""

    value: int
    decimals: int
    is_valid: bool = True
    updated_at: int = 0


@dataclass(frozen=True)
class AccrualResult:
    """Outcome of applying accrued yield to one position."""

    position: Position
    yield_applied: int


@dataclass(frozen=True)
class DepositEvent:
    account: str
    amount: int
    net_amount: int
    fee: int
    borrowed_amount: int
    timestamp: int


@dataclass(frozen=True)
class WithdrawalEvent:
    account: str
    amount: int
    yield_applied: int
    timestamp: int


@dataclass(frozen=True)
class SweepEvent:
    accounts: int
    total_yield_applied: int
    timestamp: int


PositionEvent = DepositEvent | WithdrawalEvent | SweepEvent


@dataclass(frozen=True)
class SweepResult:
    """Summary returned by a sweep invocation."""

    ran: bool
    accounts: int = 0
    total_yield_applied: int = 0
    timestamp: int = 0
