"""
Client-side notification state.

``NotificationService`` owns one user's notification cache and its
polling loop. Views attach with :meth:`subscribe` and detach with the
returned callable; the service is started on login and stopped on
logout. Every poll carries a cancellation token so a response that
arrives after a newer poll started, or after ``stop()``, is dropped.

Each change to the cache is handed to the optional ``on_change`` hook
for persistence; :meth:`load_cache` seeds it again on the next start.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Protocol

import httpx

from ..config import DEFAULT_SETTINGS, Settings
from ..scheduling import CancellationToken, PeriodicTask
from .models import Notification, NotificationType
from .reconciler import local_notification, reconcile, unread_count

logger = logging.getLogger(__name__)

Subscriber = Callable[[Notification], None]
CacheListener = Callable[[list[Notification]], None]


class NotificationSource(Protocol):
    async def list_notifications(self, user_id: str) -> list[Notification]: ...
    async def mark_read(self, notification_id: str) -> None: ...
    async def mark_all_read(self, user_id: str) -> None: ...
    async def delete_notification(self, notification_id: str, user_id: str) -> None: ...
    async def clear_notifications(self, user_id: str) -> None: ...


class NotificationService:
    def __init__(
        self,
        user_id: str,
        source: NotificationSource,
        settings: Settings = DEFAULT_SETTINGS,
        on_change: CacheListener | None = None,
    ):
        self.user_id = user_id
        self.source = source
        self.cap = settings.notification_cap
        self.needs_resync = False
        self._cache: list[Notification] = []
        self._on_change = on_change
        self._subscribers: list[Subscriber] = []
        self._inflight: CancellationToken | None = None
        self._dismissed: set[str] = set()
        self._running = False
        self._poller = PeriodicTask(self.refresh, settings.poll_interval, name=f"notifications:{user_id}")

    # -- lifecycle -------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True
        self._poller.start()

    async def stop(self) -> None:
        self._running = False
        if self._inflight is not None:
            self._inflight.cancel()
            self._inflight = None
        await self._poller.stop()
        self._subscribers.clear()
        self._dismissed.clear()

    # -- subscriptions ---------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _surface(self, notification: Notification) -> None:
        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception:
                logger.warning("Notification subscriber failed", exc_info=True)

    # -- state -----------------------------------------------------------

    @property
    def notifications(self) -> list[Notification]:
        return list(self._cache)

    @property
    def unread_count(self) -> int:
        return unread_count(self._cache)

    def _set_cache(self, notifications: list[Notification]) -> None:
        self._cache = notifications
        if self._on_change is None:
            return
        try:
            self._on_change(list(notifications))
        except Exception:
            logger.warning("Failed to persist notification cache for %s", self.user_id, exc_info=True)

    def load_cache(self, cached: list[Notification | dict]) -> None:
        """Seed the cache from local storage before the first poll."""
        self._cache = [Notification.model_validate(n) for n in cached][: self.cap]

    def dump_cache(self) -> list[dict]:
        """JSON-ready copy of the cache, the inverse of :meth:`load_cache`."""
        return [n.model_dump(mode="json") for n in self._cache]

    async def refresh(self) -> list[Notification]:
        """Fetch from the server and merge. Returns the surfaced entries."""
        if self._inflight is not None:
            self._inflight.cancel()
        token = CancellationToken()
        self._inflight = token

        server_list = await self.source.list_notifications(self.user_id)

        if token.cancelled:
            logger.debug("Discarding superseded notification poll for %s", self.user_id)
            return []
        self._inflight = None

        # Once the server has forgotten a dismissed id it can no longer resurface
        self._dismissed &= {n.id for n in server_list}
        server_list = [n for n in server_list if n.id not in self._dismissed]
        result = reconcile(self._cache, server_list, cap=self.cap)
        self._set_cache(result.merged)
        self.needs_resync = False
        for notification in result.to_surface:
            self._surface(notification)
        return result.to_surface

    # -- local mutations mirrored to the server --------------------------

    async def _mirror(self, action: str, call: Awaitable[Any]) -> bool:
        try:
            await call
            return True
        except httpx.HTTPError:
            logger.warning("Failed to %s on server for %s", action, self.user_id, exc_info=True)
            self.needs_resync = True
            return False

    def add_local(self, type_: NotificationType, message: str, data: dict | None = None) -> Notification:
        notification = local_notification(type_, message, data)
        self._set_cache([notification, *self._cache][: self.cap])
        self._surface(notification)
        return notification

    async def mark_read(self, notification_id: str) -> bool:
        self._set_cache([
            n.model_copy(update={"read": True}) if n.id == notification_id else n
            for n in self._cache
        ])
        if notification_id.startswith("local-"):
            return True
        return await self._mirror("mark notification read", self.source.mark_read(notification_id))

    async def mark_all_read(self) -> bool:
        self._set_cache([n.model_copy(update={"read": True}) for n in self._cache])
        return await self._mirror("mark all notifications read", self.source.mark_all_read(self.user_id))

    async def remove(self, notification_id: str) -> bool:
        self._set_cache([n for n in self._cache if n.id != notification_id])
        if notification_id.startswith("local-"):
            return True
        self._dismissed.add(notification_id)
        return await self._mirror(
            "delete notification",
            self.source.delete_notification(notification_id, self.user_id),
        )

    async def clear_all(self) -> bool:
        self._dismissed.update(n.id for n in self._cache if not n.local)
        self._set_cache([])
        return await self._mirror("clear notifications", self.source.clear_notifications(self.user_id))
