"""Asyncio delay scheduler (implements IDelayScheduler)."""

from __future__ import annotations

import asyncio

from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class AsyncioDelayScheduler:
    """Suspends only the awaiting task; the event loop keeps serving other executions.

    Args:
        unit_seconds: Seconds per configured delay minute (60 in production).
    """

    def __init__(self, unit_seconds: float = 60.0) -> None:
        self._unit_seconds = unit_seconds

    async def wait(self, minutes: float) -> None:
        if minutes <= 0:
            return
        seconds = minutes * self._unit_seconds
        logger.debug("Delaying execution for %s minute(s) (%.3fs)", minutes, seconds)
        await asyncio.sleep(seconds)
