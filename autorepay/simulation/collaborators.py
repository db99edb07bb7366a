"""Simulated custody, yield market and fee vault sharing one token book."""
from __future__ import annotations

import logging

from .token import SimulatedToken

logger = logging.getLogger(__name__)


class _FailureInjection:
    """Lets tests make a named operation raise until cleared."""

    def __init__(self) -> None:
        self.failures: dict[str, Exception] = {}

    def fail(self, operation: str, error: Exception | None = None) -> None:
        self.failures[operation] = error or RuntimeError(f"{operation} unavailable")

    def recover(self, operation: str | None = None) -> None:
        if operation is None:
            self.failures.clear()
        else:
            self.failures.pop(operation, None)

    def _check(self, operation: str) -> None:
        error = self.failures.get(operation)
        if error is not None:
            raise error


class SimulatedCustody(_FailureInjection):
    def __init__(self, token: SimulatedToken, vault_address: str) -> None:
        super().__init__()
        self._token = token
        self.vault_address = vault_address

    async def transfer_in(self, sender: str, amount: int) -> None:
        self._check("transfer_in")
        self._token.transfer(sender, self.vault_address, amount)

    async def transfer_out(self, recipient: str, amount: int) -> None:
        self._check("transfer_out")
        self._token.transfer(self.vault_address, recipient, amount)

    async def approve(self, spender: str, amount: int) -> None:
        self._check("approve")
        self._token.approve(self.vault_address, spender, amount)


class SimulatedYieldMarket(_FailureInjection):
    """Lending-pool stand-in; only ``owner`` (the vault) supplies and withdraws."""

    def __init__(
        self, token: SimulatedToken, owner: str, address: str = "yield-market"
    ) -> None:
        super().__init__()
        self._token = token
        self.owner = owner
        self._address = address
        self.supplied: dict[str, int] = {}

    @property
    def address(self) -> str:
        return self._address

    async def supply(self, asset: str, amount: int, on_behalf_of: str) -> None:
        self._check("supply")
        self._token.transfer_from(self._address, on_behalf_of, self._address, amount)
        self.supplied[on_behalf_of] = self.supplied.get(on_behalf_of, 0) + amount

    async def withdraw(self, asset: str, amount: int, to: str) -> int:
        self._check("withdraw")
        held = self.supplied.get(self.owner, 0)
        if held < amount:
            raise RuntimeError(f"market holds {held} for {self.owner}, needs {amount}")
        self._token.transfer(self._address, to, amount)
        self.supplied[self.owner] = held - amount
        return amount

    async def pooled_balance(self) -> int:
        self._check("pooled_balance")
        return self.supplied.get(self.owner, 0)

    def accrue_yield(self, amount: int) -> None:
        """Credit ``amount`` of interest to the owner's supplied balance."""
        self._token.mint(self._address, amount)
        self.supplied[self.owner] = self.supplied.get(self.owner, 0) + amount
        logger.info("Simulated market accrued %d of yield", amount)


class SimulatedFeeVault(_FailureInjection):
    def __init__(
        self, token: SimulatedToken, vault_address: str, address: str = "fee-vault"
    ) -> None:
        super().__init__()
        self._token = token
        self.vault_address = vault_address
        self.address = address
        self.total_deposited = 0

    async def deposit_fee(self, amount: int) -> None:
        self._check("deposit_fee")
        self._token.transfer(self.vault_address, self.address, amount)
        self.total_deposited += amount
