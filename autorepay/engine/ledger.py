"""Per-account positions plus the append-only account registry."""
from __future__ import annotations

from typing import Iterator

from ..models import Position


class AccountLedger:
    """Pure storage for positions; no business rules live here.

    Registered accounts occupy stable slots in registration order; the
    index map resolves an account id to its slot. Slots are never freed.
    """

    def __init__(self) -> None:
        self._slots: list[str] = []
        self._index: dict[str, int] = {}
        self._positions: dict[str, Position] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def get(self, account: str) -> Position:
        return self._positions.get(account, Position())

    def put(self, account: str, position: Position) -> None:
        self._positions[account] = position

    def is_registered(self, account: str) -> bool:
        return account in self._index

    def register_if_new(self, account: str) -> bool:
        """Register ``account``; returns True only if it was not known before."""
        if account in self._index:
            return False
        self._index[account] = len(self._slots)
        self._slots.append(account)
        return True

    def slot_of(self, account: str) -> int | None:
        return self._index.get(account)

    def accounts(self) -> Iterator[str]:
        """Registered accounts in registration order."""
        return iter(list(self._slots))

    def positions(self) -> Iterator[tuple[str, Position]]:
        for account in list(self._slots):
            yield account, self.get(account)

    def clear(self) -> None:
        self._slots.clear()
        self._index.clear()
        self._positions.clear()
