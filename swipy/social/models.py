from __future__ import annotations

import time

from pydantic import BaseModel, Field

from ..catalog.models import RestaurantRef


class UserProfile(BaseModel):
    id: str
    username: str
    name: str
    avatar: str | None = None
    placeholder: bool = False


class FriendEdge(BaseModel):
    user_id: str
    friend_id: str
    timestamp: float = Field(default_factory=time.time)


class FriendRequest(BaseModel):
    friend_id: str = Field(..., min_length=1)


class MatchEntry(BaseModel):
    friend_id: str
    friend: UserProfile
    restaurant_id: str
    restaurant: RestaurantRef


class RestaurantMatches(BaseModel):
    restaurant_id: str
    matches: list[str]


class StatusUpdate(BaseModel):
    is_online: bool


class StatusQuery(BaseModel):
    user_ids: list[str]


class UserStatus(BaseModel):
    user_id: str
    is_online: bool = False
    last_seen: float | None = None
    last_swiped_at: float | None = None
