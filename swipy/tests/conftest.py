from __future__ import annotations

import pytest

from swipy.app import _default_catalog
from swipy.catalog.models import RestaurantRef
from swipy.ledger.store import clear_ledger
from swipy.notifications.store import clear_notifications
from swipy.social.friends import clear_social
from swipy.social.presence import clear_statuses
from swipy.tournament.store import clear_tournaments


@pytest.fixture(autouse=True)
def _reset_stores():
    _default_catalog.cache.clear()
    clear_ledger()
    clear_notifications()
    clear_social()
    clear_statuses()
    clear_tournaments()
    yield


def make_restaurant(rid: str, name: str | None = None, **extra) -> RestaurantRef:
    return RestaurantRef(id=rid, name=name or f"Restaurant {rid}", **extra)
