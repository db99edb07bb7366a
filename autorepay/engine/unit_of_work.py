"""All-or-nothing execution of external calls plus a ledger commit."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from ..errors import PersistenceFailure
from ..interfaces.state_store import StateStore
from .state import VaultState

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[Any]]


class UnitOfWork:
    """Snapshot the vault state on entry; on failure undo everything.

    Undo means running registered compensations in reverse order and then
    restoring the in-memory state. On success the state is persisted; a
    failing save counts as a failure of the whole unit.

    Usage::

        async with UnitOfWork(state, store) as uow:
            await market.supply(...)
            uow.on_rollback(lambda: market.withdraw(...))
            state.ledger.put(...)
    """

    def __init__(self, state: VaultState, store: StateStore | None = None) -> None:
        self._state = state
        self._store = store
        self._snapshot: dict[str, Any] | None = None
        self._compensations: list[tuple[str, Compensation]] = []

    def on_rollback(self, compensation: Compensation, label: str = "") -> None:
        self._compensations.append((label, compensation))

    async def __aenter__(self) -> UnitOfWork:
        self._snapshot = self._state.to_dict()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            try:
                if self._store is not None:
                    self._store.save(self._state.to_dict())
                return False
            except Exception as e:
                logger.error("Persisting vault state failed, rolling back: %s", e)
                await self._rollback()
                raise PersistenceFailure(str(e)) from e

        await self._rollback()
        return False

    async def _rollback(self) -> None:
        for label, compensation in reversed(self._compensations):
            try:
                await compensation()
                logger.info("Compensated %s", label or "external call")
            except Exception:
                logger.exception("Compensation %s failed", label or "external call")
        self._compensations.clear()
        if self._snapshot is not None:
            self._state.restore(self._snapshot)
