"""In-memory state store."""
from __future__ import annotations

import copy
from typing import Any


class MemoryStateStore:
    """Keeps a deep copy of the last saved snapshot."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data = copy.deepcopy(initial)
        self.saves = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._data)

    def save(self, data: dict[str, Any]) -> None:
        self._data = copy.deepcopy(data)
        self.saves += 1
