"""Persistent vault state and its snapshot format."""
from __future__ import annotations

from typing import Any

from ..models import Position
from .ledger import AccountLedger

SNAPSHOT_VERSION = 1


class VaultState:
    """Ledger, fee accumulator and global sweep timestamp.

    The fee accumulator is owned by the position manager and the sweep
    timestamp by the sweep scheduler; both live here so one snapshot
    captures a consistent view.
    """

    def __init__(
        self,
        ledger: AccountLedger | None = None,
        fees_collected: int = 0,
        global_last_update: int = 0,
    ) -> None:
        self.ledger = ledger if ledger is not None else AccountLedger()
        self.fees_collected = fees_collected
        self.global_last_update = global_last_update

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "positions": [
                {
                    "account": account,
                    "collateral_amount": position.collateral_amount,
                    "borrowed_amount": position.borrowed_amount,
                    "last_updated": position.last_updated,
                }
                for account, position in self.ledger.positions()
            ],
            "fees_collected": self.fees_collected,
            "global_last_update": self.global_last_update,
        }

    def restore(self, data: dict[str, Any]) -> None:
        """Replace the current contents with ``data`` in place."""
        version = data.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version}")

        # parse everything before touching the ledger so a bad entry changes nothing
        entries = [
            (
                entry["account"],
                Position(
                    collateral_amount=int(entry.get("collateral_amount", 0)),
                    borrowed_amount=int(entry.get("borrowed_amount", 0)),
                    last_updated=int(entry.get("last_updated", 0)),
                ),
            )
            for entry in data.get("positions", [])
        ]
        fees_collected = int(data.get("fees_collected", 0))
        global_last_update = int(data.get("global_last_update", 0))

        self.ledger.clear()
        for account, position in entries:
            self.ledger.register_if_new(account)
            self.ledger.put(account, position)
        self.fees_collected = fees_collected
        self.global_last_update = global_last_update

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VaultState:
        state = cls()
        state.restore(data)
        return state
