"""External market holding the pooled collateral."""
from typing import Protocol


class YieldMarket(Protocol):
    """Abstract interface for the yield-generating market."""

    @property
    def address(self) -> str: ...

    async def supply(self, asset: str, amount: int, on_behalf_of: str) -> None: ...

    async def withdraw(self, asset: str, amount: int, to: str) -> int: ...

    async def pooled_balance(self) -> int: ...
