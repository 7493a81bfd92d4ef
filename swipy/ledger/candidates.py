from __future__ import annotations

from ..catalog.models import RestaurantRef
from .store import favorite_ids, swiped_ids


def build_candidates(user_id: str, page: list[RestaurantRef]) -> list[RestaurantRef]:
    """Drop restaurants the user already swiped on or saved.

    Membership is decided by ``id`` alone and catalog order is preserved.
    An empty result is returned as-is; fetching the next page is up to
    the caller.
    """
    decided = swiped_ids(user_id) | favorite_ids(user_id)
    return [r for r in page if r.id not in decided]
