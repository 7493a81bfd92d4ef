from __future__ import annotations

import logging
from urllib.parse import quote

from ..ledger.store import InvalidIdentifier, validate_id
from .models import FriendEdge, UserProfile

logger = logging.getLogger(__name__)

_users: dict[str, UserProfile] = {}
_edges: dict[tuple[str, str], FriendEdge] = {}


class FriendshipExists(Exception):
    pass


def _avatar_url(username: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(username)}&background=4ecdc4&color=fff"


def register_user(user_id: str, username: str, name: str | None = None) -> UserProfile:
    validate_id(user_id, "user id")
    profile = UserProfile(
        id=user_id,
        username=username,
        name=name or username,
        avatar=_avatar_url(username),
    )
    _users[user_id] = profile
    return profile


def get_profile(user_id: str) -> UserProfile:
    """Return the user's profile, or a placeholder identity for unknown ids."""
    profile = _users.get(user_id)
    if profile is not None:
        return profile
    return UserProfile(id=user_id, username=user_id, name="Unknown user", placeholder=True)


def list_users() -> list[UserProfile]:
    return list(_users.values())


def add_friend(user_id: str, friend_id: str) -> FriendEdge:
    """Create the friendship in both directions."""
    validate_id(user_id, "user id")
    validate_id(friend_id, "friend id")
    if user_id == friend_id:
        raise InvalidIdentifier("A user cannot befriend themselves")
    if (user_id, friend_id) in _edges or (friend_id, user_id) in _edges:
        raise FriendshipExists(f"{user_id} and {friend_id} are already friends")

    edge = FriendEdge(user_id=user_id, friend_id=friend_id)
    _edges[(user_id, friend_id)] = edge
    _edges[(friend_id, user_id)] = FriendEdge(user_id=friend_id, friend_id=user_id)
    logger.info("Friendship created between %s and %s", user_id, friend_id)
    return edge


def remove_friend(user_id: str, friend_id: str) -> int:
    """Delete both directions; returns how many edges were removed."""
    validate_id(user_id, "user id")
    validate_id(friend_id, "friend id")
    removed = 0
    for key in ((user_id, friend_id), (friend_id, user_id)):
        if _edges.pop(key, None) is not None:
            removed += 1
    return removed


def are_friends(user_id: str, friend_id: str) -> bool:
    return (user_id, friend_id) in _edges


def friend_ids(user_id: str) -> set[str]:
    return {fid for (uid, fid) in _edges if uid == user_id}


def friends_of(user_id: str) -> list[UserProfile]:
    return [get_profile(fid) for (uid, fid) in _edges if uid == user_id]


def clear_social() -> None:
    _users.clear()
    _edges.clear()
