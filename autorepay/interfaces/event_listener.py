"""Event listener protocol — receives committed vault events."""
from typing import Protocol

from ..models import PositionEvent


class EventListener(Protocol):
    async def on_event(self, event: PositionEvent) -> None: ...
