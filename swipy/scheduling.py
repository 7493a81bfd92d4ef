from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Marks a request as superseded so its late result is discarded."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class PeriodicTask:
    """Run ``func`` every ``interval`` seconds until stopped.

    Failures of a single run are logged and do not stop the loop.
    ``stop()`` cancels the run in flight.
    """

    def __init__(
        self,
        func: Callable[[], Awaitable[None]],
        interval: float,
        name: str = "periodic-task",
    ):
        self.func = func
        self.interval = interval
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name=self.name)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            try:
                await self.func()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.warning("%s run failed", self.name, exc_info=True)
            await asyncio.sleep(self.interval)
