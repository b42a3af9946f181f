"""
Periodic sync scheduler.

Runs an injected coroutine function (normally run_scheduled_sync) every
`interval_seconds` inside the service process. Started and stopped by the
FastAPI lifespan; tests drive it with a fake callable and tiny intervals.

Behaviour:
  • A failing cycle is logged and the loop keeps going — the next tick
    is the retry.
  • run_once() and the background loop share a lock, so cycles of one
    scheduler never overlap. Other processes are not coordinated.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class SyncScheduler:
    """
    Usage:
        scheduler = SyncScheduler(run_scheduled_sync, interval_seconds=300)
        await scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        run: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        run_immediately: bool = True,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._run = run
        self._interval = interval_seconds
        self._run_immediately = run_immediately

        self._running = False
        self._task: asyncio.Task | None = None
        self._run_lock = asyncio.Lock()
        self.cycles = 0

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_once(self) -> Any:
        """Run one cycle now, waiting for any cycle already in progress."""
        async with self._run_lock:
            result = await self._run()
            self.cycles += 1
            return result

    async def start(self) -> None:
        if self._running:
            logger.warning("Sync scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._background_loop())
        logger.info("Sync scheduler started (every %.0f s)", self._interval)

    async def stop(self) -> None:
        """Cancel the loop; an in-flight cycle is cancelled with it."""
        if not self._running:
            return

        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Sync scheduler stopped")

    async def _background_loop(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self._interval)

        while self._running:
            try:
                await self.run_once()
            except Exception:
                logger.exception("Scheduled sync cycle failed")

            await asyncio.sleep(self._interval)
