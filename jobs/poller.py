"""Periodic Poller

Runs one async action right away and then at a fixed or dynamic interval
as a background task. A failing cycle is logged and the next one runs on
schedule; only cancellation stops the loop.
"""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

Interval = float | Callable[[], float]


class Poller:

    def __init__(self, name: str, action: Callable[[], Awaitable], interval: Interval):
        self.name = name
        self.action = action
        self.interval = interval
        self.cycle = 0
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _next_delay(self) -> float:
        return self.interval() if callable(self.interval) else self.interval

    async def run_once(self) -> None:
        """Execute a single cycle; errors are logged, cancellation propagates."""
        self.cycle += 1
        try:
            await self.action()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"[{self.name}] Cycle {self.cycle} failed: {e}", exc_info=True)

    async def _loop(self) -> None:
        logger.info(f"[{self.name}] Poller started")
        try:
            while True:
                await self.run_once()
                await asyncio.sleep(self._next_delay())
        except asyncio.CancelledError:
            logger.info(f"[{self.name}] Poller stopped after {self.cycle} cycles")
            raise

    def start(self) -> asyncio.Task:
        if self.is_running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
