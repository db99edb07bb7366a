"""Bundle of simulated collaborators with snapshot support for the CLI."""
from __future__ import annotations

from typing import Any

from .collaborators import SimulatedCustody, SimulatedFeeVault, SimulatedYieldMarket
from .token import SimulatedToken


class SimulatedEnvironment:
    def __init__(self, vault_address: str, asset: str = "WETH") -> None:
        self.token = SimulatedToken(asset)
        self.custody = SimulatedCustody(self.token, vault_address)
        self.market = SimulatedYieldMarket(self.token, owner=vault_address)
        self.fee_vault = SimulatedFeeVault(self.token, vault_address)

    def fund(self, account: str, amount: int) -> None:
        self.token.mint(account, amount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token.to_dict(),
            "market_supplied": dict(self.market.supplied),
            "fees_deposited": self.fee_vault.total_deposited,
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], vault_address: str, asset: str = "WETH"
    ) -> SimulatedEnvironment:
        env = cls(vault_address, asset)
        token = SimulatedToken.from_dict(data.get("token", {"symbol": asset}))
        env.token.balances = token.balances
        env.token.allowances = token.allowances
        env.market.supplied = {k: int(v) for k, v in data.get("market_supplied", {}).items()}
        env.fee_vault.total_deposited = int(data.get("fees_deposited", 0))
        return env
