"""Durable snapshot persistence."""
from typing import Any, Protocol


class StateStore(Protocol):
    """Abstract interface for loading and saving vault snapshots."""

    def load(self) -> dict[str, Any] | None: ...

    def save(self, data: dict[str, Any]) -> None: ...
