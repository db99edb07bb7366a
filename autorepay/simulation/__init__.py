"""In-process collaborators for local runs and tests."""
from .collaborators import SimulatedCustody, SimulatedFeeVault, SimulatedYieldMarket
from .environment import SimulatedEnvironment
from .token import InsufficientBalance, SimulatedToken

__all__ = [
    "InsufficientBalance",
    "SimulatedCustody",
    "SimulatedEnvironment",
    "SimulatedFeeVault",
    "SimulatedToken",
    "SimulatedYieldMarket",
]
