from __future__ import annotations

import pytest

from swipy.ledger.models import SwipeDirection
from swipy.ledger.store import InvalidIdentifier, add_favorite, record_swipe, unlike
from swipy.social.friends import (
    FriendshipExists,
    add_friend,
    are_friends,
    friends_of,
    get_profile,
    register_user,
    remove_friend,
)
from swipy.social.matches import (
    match_counts,
    matches_for_restaurant,
    matches_for_user,
    new_match_friends,
)
from swipy.social.presence import statuses, touch_last_swiped, update_status

from .conftest import make_restaurant


# ── Friend graph ─────────────────────────────────────────────────────────


def test_friendship_is_symmetric():
    add_friend("a", "b")
    assert are_friends("a", "b")
    assert are_friends("b", "a")


def test_remove_friend_deletes_both_edges():
    add_friend("a", "b")
    assert remove_friend("b", "a") == 2
    assert not are_friends("a", "b")
    assert not are_friends("b", "a")
    assert remove_friend("a", "b") == 0


def test_duplicate_friendship_rejected():
    add_friend("a", "b")
    with pytest.raises(FriendshipExists):
        add_friend("b", "a")


def test_self_friendship_rejected():
    with pytest.raises(InvalidIdentifier):
        add_friend("a", "a")


def test_unknown_friend_gets_placeholder_profile():
    register_user("a", "alice", "Alice")
    add_friend("a", "ghost")
    profiles = {p.id: p for p in friends_of("a")}
    assert profiles["ghost"].placeholder
    assert not get_profile("a").placeholder
    assert get_profile("a").name == "Alice"


# ── Matches ──────────────────────────────────────────────────────────────


def test_shared_favorite_is_a_match_both_ways():
    add_friend("a", "b")
    add_favorite("a", make_restaurant("R"))
    add_favorite("b", make_restaurant("R"))
    assert matches_for_restaurant("a", "R") == {"b"}
    assert matches_for_restaurant("b", "R") == {"a"}


def test_non_friends_never_match():
    add_favorite("a", make_restaurant("R"))
    add_favorite("c", make_restaurant("R"))
    assert matches_for_restaurant("a", "R") == set()


def test_dislike_is_not_a_match():
    add_friend("a", "b")
    add_favorite("a", make_restaurant("R"))
    record_swipe("b", "R", SwipeDirection.dislike)
    assert matches_for_restaurant("a", "R") == set()


def test_unlike_removes_match():
    add_friend("a", "b")
    record_swipe("a", "R", SwipeDirection.like, make_restaurant("R"))
    record_swipe("b", "R", SwipeDirection.like, make_restaurant("R"))
    unlike("b", "R")
    assert matches_for_restaurant("a", "R") == set()


def test_match_symmetry_over_a_small_graph():
    add_friend("a", "b")
    add_friend("a", "c")
    add_friend("b", "d")
    likes = {"a": ["1", "2"], "b": ["1", "3"], "c": ["2"], "d": ["1", "3"]}
    for user, rids in likes.items():
        for rid in rids:
            add_favorite(user, make_restaurant(rid))
    users = list(likes)
    for u in users:
        for f in users:
            for rid in ("1", "2", "3"):
                assert (f in matches_for_restaurant(u, rid)) == (u in matches_for_restaurant(f, rid))


def test_matches_for_user_grouped_by_restaurant():
    register_user("b", "bob", "Bob")
    add_friend("a", "b")
    add_friend("a", "c")
    for rid in ("1", "2"):
        add_favorite("a", make_restaurant(rid))
    add_favorite("b", make_restaurant("1"))
    add_favorite("c", make_restaurant("1"))
    add_favorite("c", make_restaurant("2"))

    entries = matches_for_user("a")
    pairs = [(e.restaurant_id, e.friend_id) for e in entries]
    assert sorted(pairs) == [("1", "b"), ("1", "c"), ("2", "c")]
    restaurants = [e.restaurant_id for e in entries]
    # entries for one restaurant are contiguous
    assert restaurants == sorted(restaurants, key=restaurants.index)
    by_friend = {e.friend_id: e.friend for e in entries}
    assert by_friend["b"].name == "Bob"
    assert by_friend["c"].placeholder


def test_matches_for_user_without_friends():
    add_favorite("a", make_restaurant("1"))
    assert matches_for_user("a") == []


def test_new_match_friends_reports_growth_only():
    add_friend("a", "b")
    add_friend("a", "c")
    add_favorite("a", make_restaurant("1"))
    add_favorite("b", make_restaurant("1"))
    before = match_counts(matches_for_user("a"))
    assert before == {"b": 1}

    add_favorite("c", make_restaurant("1"))
    after = match_counts(matches_for_user("a"))
    assert new_match_friends(before, after) == ["c"]
    assert new_match_friends(after, after) == []


# ── Presence ─────────────────────────────────────────────────────────────


def test_status_updates_and_defaults():
    update_status("a", True)
    touch_last_swiped("a")
    by_id = {s.user_id: s for s in statuses(["a", "z"])}
    assert by_id["a"].is_online
    assert by_id["a"].last_swiped_at is not None
    assert not by_id["z"].is_online
    assert by_id["z"].last_seen is None
