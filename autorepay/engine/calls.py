"""Helpers for awaiting collaborators and delivering events."""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Iterable

from ..errors import VaultError
from ..interfaces.event_listener import EventListener
from ..models import PositionEvent

logger = logging.getLogger(__name__)


async def guarded(call: Awaitable[Any], error: type[VaultError], operation: str) -> Any:
    """Await ``call``, re-raising foreign exceptions as ``error(operation, reason)``."""
    try:
        return await call
    except VaultError:
        raise
    except Exception as e:
        raise error(operation, str(e)) from e


async def notify(listeners: Iterable[EventListener], event: PositionEvent) -> None:
    """Deliver ``event`` to every listener; a failing listener is only logged."""
    for listener in listeners:
        try:
            await listener.on_event(event)
        except Exception as e:
            logger.error("Event listener %r failed: %s", listener, e)
