"""
Merging a client-side notification cache with the server's list.

Everything here is pure: the functions take the cache and the server
response and return new lists. Whether an alert is actually shown for a
surfaced entry is decided by the caller, which knows what screen is in
focus (see :func:`should_surface`).
"""

from __future__ import annotations

import uuid

from ..config import DEFAULT_SETTINGS
from .models import Notification, NotificationType, ReconcileResult, utcnow


def summary_notification(new_entries: list[Notification]) -> Notification:
    return Notification(
        id=f"local-{uuid.uuid4().hex}",
        type=NotificationType.summary,
        message=f"You have {len(new_entries)} new notifications",
        data={"count": len(new_entries), "ids": [n.id for n in new_entries]},
        local=True,
    )


def reconcile(
    local_cache: list[Notification],
    server_list: list[Notification],
    cap: int = DEFAULT_SETTINGS.notification_cap,
) -> ReconcileResult:
    local_by_id = {n.id: n for n in local_cache}

    merged_by_id: dict[str, Notification] = {}
    new_entries: list[Notification] = []
    for incoming in server_list:
        if incoming.id in merged_by_id:
            continue
        cached = local_by_id.get(incoming.id)
        if cached is None:
            new_entries.append(incoming)
            merged_by_id[incoming.id] = incoming
        else:
            # Read state only moves forward; a pending local mark-read survives
            merged_by_id[incoming.id] = incoming.model_copy(
                update={"read": incoming.read or cached.read, "local": False},
            )

    for cached in local_cache:
        if cached.local and cached.id not in merged_by_id:
            merged_by_id[cached.id] = cached

    merged = sorted(merged_by_id.values(), key=lambda n: n.created_at, reverse=True)[:cap]

    # An entry trimmed by the cap is not cached, so it must not be surfaced
    # either or every later poll would report it as new again.
    kept = {n.id for n in merged}
    new_entries = [n for n in new_entries if n.id in kept]

    if len(new_entries) == 1:
        to_surface = list(new_entries)
    elif len(new_entries) > 1:
        to_surface = [summary_notification(new_entries)]
    else:
        to_surface = []

    return ReconcileResult(
        merged=merged,
        to_surface=to_surface,
        new_ids=[n.id for n in new_entries],
    )


def unread_count(cache: list[Notification]) -> int:
    return sum(1 for n in cache if not n.read)


def semantic_target(notification: Notification) -> tuple[str, str] | None:
    """The screen a notification is about, e.g. ``("chat", friend_id)``."""
    data = notification.data or {}
    friend_id = data.get("friend_id") or data.get("friendId")
    restaurant_id = data.get("restaurant_id") or data.get("restaurantId")
    if notification.type is NotificationType.message and friend_id:
        return ("chat", str(friend_id))
    if notification.type is NotificationType.match and friend_id:
        return ("matches", str(friend_id))
    if notification.type is NotificationType.invitation and restaurant_id:
        return ("restaurant", str(restaurant_id))
    return None


def should_surface(notification: Notification, focused: tuple[str, str] | None) -> bool:
    """False when the viewer is already looking at the notification's target."""
    if focused is None:
        return True
    return semantic_target(notification) != focused


def local_notification(type_: NotificationType, message: str, data: dict | None = None) -> Notification:
    return Notification(
        id=f"local-{uuid.uuid4().hex}",
        type=type_,
        message=message,
        created_at=utcnow(),
        data=data or {},
        local=True,
    )
