"""Notifier protocol — outbound channel for vault event messages."""
from typing import Protocol


class Notifier(Protocol):
    """Abstract interface for delivering text notifications."""

    async def send_alert(self, message: str, subject: str = "") -> bool: ...

    async def send_log(self, message: str, silent: bool = True) -> bool: ...
