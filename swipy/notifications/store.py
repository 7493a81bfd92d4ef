from __future__ import annotations

import logging
import uuid

from ..config import DEFAULT_SETTINGS
from .models import Notification, NotificationCreate

logger = logging.getLogger(__name__)

# notification id -> (recipient user id, notification), in creation order
_notifications: dict[str, tuple[str, Notification]] = {}


class NotificationNotFound(LookupError):
    pass


class NotificationForbidden(PermissionError):
    pass


def create_notification(payload: NotificationCreate) -> Notification:
    notification = Notification(
        id=uuid.uuid4().hex,
        type=payload.type,
        message=payload.message,
        body=payload.body,
        data=payload.data,
    )
    _notifications[notification.id] = (payload.user_id, notification)
    logger.debug("Notification %s (%s) created for %s", notification.id, notification.type.value, payload.user_id)
    return notification


def list_notifications(user_id: str, limit: int = DEFAULT_SETTINGS.notification_cap) -> list[Notification]:
    """Newest first, at most *limit* entries."""
    owned = [n for uid, n in reversed(_notifications.values()) if uid == user_id]
    return owned[:limit]


def mark_read(notification_id: str) -> Notification:
    entry = _notifications.get(notification_id)
    if entry is None:
        raise NotificationNotFound(notification_id)
    user_id, notification = entry
    updated = notification.model_copy(update={"read": True})
    _notifications[notification_id] = (user_id, updated)
    return updated


def mark_all_read(user_id: str) -> int:
    modified = 0
    for nid, (uid, notification) in list(_notifications.items()):
        if uid == user_id and not notification.read:
            _notifications[nid] = (uid, notification.model_copy(update={"read": True}))
            modified += 1
    return modified


def delete_notification(notification_id: str, user_id: str) -> None:
    entry = _notifications.get(notification_id)
    if entry is None:
        raise NotificationNotFound(notification_id)
    if entry[0] != user_id:
        raise NotificationForbidden(f"Notification {notification_id} does not belong to {user_id}")
    del _notifications[notification_id]


def clear_user_notifications(user_id: str) -> int:
    doomed = [nid for nid, (uid, _) in _notifications.items() if uid == user_id]
    for nid in doomed:
        del _notifications[nid]
    return len(doomed)


def clear_notifications() -> None:
    _notifications.clear()
