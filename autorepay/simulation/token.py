"""In-process token balance book backing the simulated collaborators."""
from __future__ import annotations

from typing import Any


class InsufficientBalance(Exception):
    pass


class SimulatedToken:
    """Balances and allowances for a single fungible asset."""

    def __init__(self, symbol: str = "WETH") -> None:
        self.symbol = symbol
        self.balances: dict[str, int] = {}
        self.allowances: dict[tuple[str, str], int] = {}

    def balance_of(self, address: str) -> int:
        return self.balances.get(address, 0)

    def mint(self, address: str, amount: int) -> None:
        self.balances[address] = self.balance_of(address) + amount

    def transfer(self, src: str, dst: str, amount: int) -> None:
        if self.balance_of(src) < amount:
            raise InsufficientBalance(
                f"{src} holds {self.balance_of(src)} {self.symbol}, needs {amount}"
            )
        self.balances[src] = self.balance_of(src) - amount
        self.balances[dst] = self.balance_of(dst) + amount

    def approve(self, owner: str, spender: str, amount: int) -> None:
        self.allowances[(owner, spender)] = amount

    def transfer_from(self, spender: str, src: str, dst: str, amount: int) -> None:
        allowed = self.allowances.get((src, spender), 0)
        if allowed < amount:
            raise InsufficientBalance(
                f"{spender} may move {allowed} {self.symbol} from {src}, needs {amount}"
            )
        self.transfer(src, dst, amount)
        self.allowances[(src, spender)] = allowed - amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "balances": dict(self.balances),
            "allowances": [
                {"owner": o, "spender": s, "amount": a}
                for (o, s), a in self.allowances.items()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimulatedToken:
        token = cls(data.get("symbol", "WETH"))
        token.balances = {k: int(v) for k, v in data.get("balances", {}).items()}
        token.allowances = {
            (a["owner"], a["spender"]): int(a["amount"]) for a in data.get("allowances", [])
        }
        return token
