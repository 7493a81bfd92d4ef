from __future__ import annotations

import logging
import time

from .models import UserStatus

logger = logging.getLogger(__name__)

_statuses: dict[str, UserStatus] = {}


def update_status(user_id: str, is_online: bool) -> UserStatus:
    status = _statuses.get(user_id) or UserStatus(user_id=user_id)
    status = status.model_copy(update={"is_online": is_online, "last_seen": time.time()})
    _statuses[user_id] = status
    return status


def touch_last_swiped(user_id: str) -> None:
    """Heartbeat after a swipe. Never raises into the swipe that triggered it."""
    try:
        status = _statuses.get(user_id) or UserStatus(user_id=user_id)
        _statuses[user_id] = status.model_copy(update={"last_swiped_at": time.time()})
    except Exception:
        logger.warning("Failed to record last swipe for %s", user_id, exc_info=True)


def statuses(user_ids: list[str]) -> list[UserStatus]:
    return [_statuses.get(uid) or UserStatus(user_id=uid) for uid in user_ids]


def clear_statuses() -> None:
    _statuses.clear()
