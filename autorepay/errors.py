"""Errors raised by vault operations. All of them derive from VaultError."""
from __future__ import annotations


class VaultError(Exception):
    """Base exception for vault operations."""

    def __init__(self, message: str, code: str = "VAULT_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidAmount(VaultError):
    """Raised for zero or negative amounts."""

    def __init__(self, amount: int) -> None:
        self.amount = amount
        super().__init__(f"Amount must be positive, got {amount}", code="INVALID_AMOUNT")


class InsufficientCollateral(VaultError):
    """Raised when a withdrawal exceeds the recorded collateral."""

    def __init__(self, account: str, requested: int, available: int) -> None:
        self.account = account
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient collateral for {account}: requested {requested}, available {available}",
            code="INSUFFICIENT_COLLATERAL",
        )


class DebtNotFullyRepaid(VaultError):
    """Raised when a withdrawal is attempted with outstanding debt."""

    def __init__(self, account: str, outstanding: int) -> None:
        self.account = account
        self.outstanding = outstanding
        super().__init__(
            f"Debt not fully repaid for {account}: {outstanding} outstanding",
            code="DEBT_NOT_FULLY_REPAID",
        )


class OracleUnavailable(VaultError):
    """Raised when the price feed cannot produce a usable quote."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Price oracle unavailable: {reason}", code="ORACLE_UNAVAILABLE")


class ExternalMarketFailure(VaultError):
    """Raised when a yield market call fails."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(
            f"Yield market {operation} failed: {reason}", code="EXTERNAL_MARKET_FAILURE"
        )


class CustodyFailure(VaultError):
    """Raised when an asset transfer into or out of custody fails."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(f"Asset custody {operation} failed: {reason}", code="CUSTODY_FAILURE")


class FeeRoutingFailure(VaultError):
    """Raised when the fee sink rejects a skimmed fee."""

    def __init__(self, amount: int, reason: str) -> None:
        self.amount = amount
        super().__init__(
            f"Routing fee of {amount} failed: {reason}", code="FEE_ROUTING_FAILURE"
        )


class LedgerInvariantError(VaultError):
    """Raised when a position would be stored with a negative amount."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="LEDGER_INVARIANT")


class PersistenceFailure(VaultError):
    """Raised when the committed state could not be saved; the operation was rolled back."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Saving vault state failed: {reason}", code="PERSISTENCE_FAILURE")
