"""
Friend match detection.

A match is a restaurant favorited by both a user and one of their
friends. Matches are derived from the friend graph and the favorites
store on every call; nothing is cached, so callers re-derive after any
favorite changes. Emitting ``match`` notifications is left to callers
(see :func:`new_match_friends`).
"""

from __future__ import annotations

from collections import Counter

from ..ledger.store import favorites_for_user, users_who_favorited
from .friends import friend_ids, get_profile
from .models import MatchEntry


def matches_for_restaurant(user_id: str, restaurant_id: str) -> set[str]:
    """Friends of *user_id* who also favorited *restaurant_id*."""
    return friend_ids(user_id) & users_who_favorited(restaurant_id)


def matches_for_user(user_id: str) -> list[MatchEntry]:
    """One entry per (friend, restaurant) pair, grouped by restaurant."""
    friends = friend_ids(user_id)
    if not friends:
        return []

    entries: list[MatchEntry] = []
    for favorite in favorites_for_user(user_id):
        matched = friends & users_who_favorited(favorite.restaurant_id)
        for fid in sorted(matched):
            entries.append(MatchEntry(
                friend_id=fid,
                friend=get_profile(fid),
                restaurant_id=favorite.restaurant_id,
                restaurant=favorite.restaurant,
            ))
    return entries


def match_counts(entries: list[MatchEntry]) -> dict[str, int]:
    return dict(Counter(e.friend_id for e in entries))


def new_match_friends(previous: dict[str, int], current: dict[str, int]) -> list[str]:
    """Friends whose match count grew since the *previous* snapshot."""
    return sorted(fid for fid, count in current.items() if count > previous.get(fid, 0))
