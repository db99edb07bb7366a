"""Movement of the principal asset in and out of the vault."""
from typing import Protocol


class AssetCustody(Protocol):
    """Abstract interface for principal-asset transfers."""

    async def transfer_in(self, sender: str, amount: int) -> None: ...

    async def transfer_out(self, recipient: str, amount: int) -> None: ...

    async def approve(self, spender: str, amount: int) -> None: ...
