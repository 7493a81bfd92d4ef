from __future__ import annotations

from swipy.ledger.candidates import build_candidates
from swipy.ledger.models import SwipeDirection
from swipy.ledger.store import add_favorite, record_swipe, unlike

from .conftest import make_restaurant

PAGE = [make_restaurant(rid) for rid in ("a", "b", "c", "d", "e")]


def _ids(page):
    return [r.id for r in page]


def test_untouched_page_passes_through_in_order():
    assert _ids(build_candidates("u1", PAGE)) == ["a", "b", "c", "d", "e"]


def test_disliked_restaurant_is_excluded():
    record_swipe("u1", "c", SwipeDirection.dislike)
    assert "c" not in _ids(build_candidates("u1", PAGE))


def test_favorite_without_swipe_is_excluded():
    add_favorite("u1", make_restaurant("b"))
    assert _ids(build_candidates("u1", PAGE)) == ["a", "c", "d", "e"]


def test_unliked_restaurant_stays_excluded():
    record_swipe("u1", "a", SwipeDirection.like, make_restaurant("a"))
    unlike("u1", "a")
    assert "a" not in _ids(build_candidates("u1", PAGE))


def test_membership_is_by_id_not_content():
    record_swipe("u1", "d", SwipeDirection.dislike)
    renamed = [make_restaurant("d", "Renamed", rating=1.0)]
    assert build_candidates("u1", renamed) == []


def test_other_users_decisions_do_not_leak():
    record_swipe("u2", "a", SwipeDirection.dislike)
    assert "a" in _ids(build_candidates("u1", PAGE))


def test_fully_filtered_page_is_empty():
    for r in PAGE:
        record_swipe("u1", r.id, SwipeDirection.like, r)
    assert build_candidates("u1", PAGE) == []


def test_no_decided_restaurant_ever_reappears():
    for i, r in enumerate(PAGE):
        if i % 2:
            record_swipe("u1", r.id, SwipeDirection.dislike)
        else:
            add_favorite("u1", r)
        remaining = _ids(build_candidates("u1", PAGE))
        for decided in PAGE[: i + 1]:
            assert decided.id not in remaining
