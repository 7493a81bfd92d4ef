from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_SETTINGS, Settings
from .notifications.models import Notification


class SwipyClient:
    """Async client for the notification and presence endpoints.

    Errors are raised as ``httpx.HTTPError``; nothing is retried here.
    """

    def __init__(
        self,
        settings: Settings = DEFAULT_SETTINGS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "SwipyClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        response = await self._client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def list_notifications(self, user_id: str) -> list[Notification]:
        data = await self._request("GET", f"/notifications/user/{user_id}")
        return [Notification.model_validate(item) for item in data]

    async def mark_read(self, notification_id: str) -> None:
        await self._request("PUT", f"/notifications/{notification_id}/read")

    async def mark_all_read(self, user_id: str) -> None:
        await self._request("PUT", f"/notifications/user/{user_id}/read-all")

    async def delete_notification(self, notification_id: str, user_id: str) -> None:
        await self._request("DELETE", f"/notifications/{notification_id}", params={"user_id": user_id})

    async def clear_notifications(self, user_id: str) -> None:
        await self._request("DELETE", f"/notifications/user/{user_id}/clear-all")

    async def update_status(self, user_id: str, is_online: bool) -> None:
        await self._request("PUT", f"/users/{user_id}/status", json={"is_online": is_online})
