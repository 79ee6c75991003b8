"""Periodic callback scheduling on the asyncio event loop."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PeriodicTicker:
    """Runs a callback immediately and then every `interval_seconds`.

    The callback runs on the event loop thread. An exception raised by the
    callback is logged and the ticker keeps going.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], object],
        name: str = "ticker",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._interval = interval_seconds
        self._callback = callback
        self._name = name
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the ticker on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self._name)

    async def stop(self) -> None:
        """Cancel the ticker and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                self._callback()
            except Exception as e:
                logger.error(f"[{self._name}] tick callback failed: {e}", exc_info=True)
            self.ticks += 1
            await self._sleep(self._interval)
