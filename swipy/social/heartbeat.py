from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ..config import DEFAULT_SETTINGS, Settings
from ..scheduling import PeriodicTask

logger = logging.getLogger(__name__)


class StatusSink(Protocol):
    async def update_status(self, user_id: str, is_online: bool) -> None: ...


class PresenceHeartbeat:
    """Reports the user as online every interval. Failures are only logged."""

    def __init__(self, user_id: str, sink: StatusSink, settings: Settings = DEFAULT_SETTINGS):
        self.user_id = user_id
        self.sink = sink
        self._task = PeriodicTask(self.beat, settings.heartbeat_interval, name=f"presence:{user_id}")

    async def beat(self, is_online: bool = True) -> bool:
        try:
            await self.sink.update_status(self.user_id, is_online)
            return True
        except httpx.HTTPError:
            logger.warning("Presence heartbeat failed for %s", self.user_id, exc_info=True)
            return False

    def start(self) -> None:
        self._task.start()

    async def stop(self) -> None:
        await self._task.stop()
        await self.beat(is_online=False)
