"""Keeper — the periodic caller that polls the sweep scheduler."""
from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from ..engine.sweep import SweepScheduler
from ..errors import VaultError
from ..interfaces.notifier import Notifier
from ..models import SweepResult

logger = logging.getLogger(__name__)

ERROR_BACKOFF_SECONDS = 60


class Keeper:
    """Poll ``is_due`` and trigger ``run_sweep``; retries are the keeper's job."""

    def __init__(
        self,
        scheduler: SweepScheduler,
        poll_seconds: int = 60,
        notifiers: Iterable[Notifier] = (),
    ) -> None:
        self._scheduler = scheduler
        self._poll_seconds = poll_seconds
        self._notifiers = list(notifiers)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    async def tick(self) -> SweepResult:
        """Run one sweep if it is due."""
        if not self._scheduler.is_due():
            return SweepResult(ran=False)
        try:
            return await self._scheduler.run_sweep()
        except VaultError as e:
            await self._send_alert(
                f"Sweep failed: {e.message} ({e.code})", subject="Vault sweep failed"
            )
            raise

    async def run_continuous(self, poll_seconds: int | None = None) -> None:
        """Run the polling loop forever."""
        interval = poll_seconds or self._poll_seconds
        logger.info(
            "Starting keeper (polling every %d seconds, sweep interval %d seconds)",
            interval,
            self._scheduler.update_interval,
        )

        while True:
            try:
                await self.tick()
                await asyncio.sleep(interval)
            except Exception as e:
                logger.error("Error in keeper loop: %s", e)
                await asyncio.sleep(ERROR_BACKOFF_SECONDS)
