"""
Per-user swipe ledger and favorites store.

Both collections are maps keyed by ``(user_id, restaurant_id)`` so that a
repeated write replaces the previous record instead of appending a new one.
Insertion order doubles as recency order.
"""

from __future__ import annotations

import logging

from ..catalog.models import RestaurantRef
from .models import FavoriteRecord, SwipeDirection, SwipeRecord

logger = logging.getLogger(__name__)

_swipes: dict[tuple[str, str], SwipeRecord] = {}
_favorites: dict[tuple[str, str], FavoriteRecord] = {}


class InvalidIdentifier(ValueError):
    """Raised for an empty or blank user/restaurant/friend id."""


def validate_id(value: str | None, kind: str = "id") -> str:
    if value is None or not str(value).strip():
        raise InvalidIdentifier(f"Invalid {kind}: {value!r}")
    return str(value)


# ---------------------------------------------------------------------------
# Swipe ledger
# ---------------------------------------------------------------------------


def record_swipe(
    user_id: str,
    restaurant_id: str,
    direction: SwipeDirection,
    restaurant: RestaurantRef | None = None,
) -> SwipeRecord:
    """Upsert the user's decision on a restaurant.

    A like also upserts a favorite carrying the restaurant snapshot. A
    dislike leaves an existing favorite in place; favorites are removed
    only through :func:`unlike`.
    """
    validate_id(user_id, "user id")
    validate_id(restaurant_id, "restaurant id")
    direction = SwipeDirection(direction)
    if direction is SwipeDirection.like:
        if restaurant is None:
            raise InvalidIdentifier("A like requires the restaurant snapshot")
        if restaurant.id != restaurant_id:
            raise InvalidIdentifier(
                f"Restaurant snapshot id {restaurant.id!r} does not match {restaurant_id!r}"
            )

    key = (user_id, restaurant_id)
    existing = _swipes.get(key)
    if existing is not None and existing.direction is direction:
        record = existing
    else:
        _swipes.pop(key, None)
        record = SwipeRecord(user_id=user_id, restaurant_id=restaurant_id, direction=direction)
        _swipes[key] = record

    if direction is SwipeDirection.like:
        add_favorite(user_id, restaurant)

    logger.debug("Swipe %s user=%s restaurant=%s", direction.value, user_id, restaurant_id)
    return record


def get_swipe(user_id: str, restaurant_id: str) -> SwipeRecord | None:
    return _swipes.get((user_id, restaurant_id))


def has_swiped(user_id: str, restaurant_id: str) -> bool:
    return (user_id, restaurant_id) in _swipes


def swipes_for_user(user_id: str) -> list[SwipeRecord]:
    return [r for (uid, _), r in _swipes.items() if uid == user_id]


def swiped_ids(user_id: str) -> set[str]:
    return {rid for (uid, rid) in _swipes if uid == user_id}


def clear_swipe_history(user_id: str) -> int:
    """Delete every swipe of *user_id*; favorites are untouched."""
    validate_id(user_id, "user id")
    keys = [k for k in _swipes if k[0] == user_id]
    for key in keys:
        del _swipes[key]
    return len(keys)


# ---------------------------------------------------------------------------
# Favorites store
# ---------------------------------------------------------------------------


def add_favorite(user_id: str, restaurant: RestaurantRef) -> FavoriteRecord:
    """Create the favorite, or return the existing one unchanged."""
    validate_id(user_id, "user id")
    validate_id(restaurant.id, "restaurant id")
    key = (user_id, restaurant.id)
    existing = _favorites.get(key)
    if existing is not None:
        return existing
    record = FavoriteRecord(user_id=user_id, restaurant_id=restaurant.id, restaurant=restaurant)
    _favorites[key] = record
    return record


def unlike(user_id: str, restaurant_id: str) -> FavoriteRecord | None:
    """Remove the favorite only. The swipe stays so discovery keeps skipping it."""
    validate_id(user_id, "user id")
    validate_id(restaurant_id, "restaurant id")
    return _favorites.pop((user_id, restaurant_id), None)


def reset_favorites(user_id: str) -> int:
    validate_id(user_id, "user id")
    keys = [k for k in _favorites if k[0] == user_id]
    for key in keys:
        del _favorites[key]
    return len(keys)


def is_favorite(user_id: str, restaurant_id: str) -> bool:
    return (user_id, restaurant_id) in _favorites


def favorites_for_user(user_id: str) -> list[FavoriteRecord]:
    """Return the user's favorites, newest first."""
    return [r for (uid, _), r in reversed(_favorites.items()) if uid == user_id]


def favorite_ids(user_id: str) -> set[str]:
    return {rid for (uid, rid) in _favorites if uid == user_id}


def users_who_favorited(restaurant_id: str) -> set[str]:
    return {uid for (uid, rid) in _favorites if rid == restaurant_id}


def clear_ledger() -> None:
    _swipes.clear()
    _favorites.clear()
