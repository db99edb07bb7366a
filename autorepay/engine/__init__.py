"""Debt and collateral accounting engine."""
from .accrual import YieldAccrualEngine
from .fees import FeeRouter
from .ledger import AccountLedger
from .policy import CollateralPolicy
from .positions import PositionManager
from .state import VaultState
from .sweep import SweepScheduler
from .unit_of_work import UnitOfWork
from .vault import Vault

__all__ = [
    "AccountLedger",
    "CollateralPolicy",
    "FeeRouter",
    "PositionManager",
    "SweepScheduler",
    "UnitOfWork",
    "Vault",
    "VaultState",
    "YieldAccrualEngine",
]
