"""Collateral policy — borrow ceiling and withdrawal gating."""
from __future__ import annotations

from ..errors import DebtNotFullyRepaid
from ..models import WAD, Position


class CollateralPolicy:
    """Fixed collateralization ratio, expressed in percent (150 = 150%)."""

    def __init__(self, collateral_ratio_pct: int = 150) -> None:
        if collateral_ratio_pct <= 0:
            raise ValueError(f"collateral_ratio_pct must be positive: {collateral_ratio_pct}")
        self.collateral_ratio_pct = collateral_ratio_pct

    def max_borrow(self, collateral_amount: int, price: int) -> int:
        """USD (WAD-scaled) borrowable against ``collateral_amount`` at ``price``."""
        return collateral_amount * price * 100 // (self.collateral_ratio_pct * WAD)

    @staticmethod
    def assert_withdrawable(account: str, position: Position) -> None:
        if position.borrowed_amount != 0:
            raise DebtNotFullyRepaid(account, position.borrowed_amount)
