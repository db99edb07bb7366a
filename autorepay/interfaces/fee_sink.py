"""Secondary vault receiving skimmed fees."""
from typing import Protocol


class FeeSink(Protocol):
    async def deposit_fee(self, amount: int) -> None: ...
