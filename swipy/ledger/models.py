from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, Field

from ..catalog.models import RestaurantRef


class SwipeDirection(str, Enum):
    like = "like"
    dislike = "dislike"


class SwipeRecord(BaseModel):
    user_id: str
    restaurant_id: str
    direction: SwipeDirection
    timestamp: float = Field(default_factory=time.time)


class FavoriteRecord(BaseModel):
    user_id: str
    restaurant_id: str
    restaurant: RestaurantRef
    timestamp: float = Field(default_factory=time.time)


class SwipeRequest(BaseModel):
    restaurant_id: str = Field(..., min_length=1)
    direction: SwipeDirection
    restaurant: RestaurantRef | None = None


class SwipeStatus(BaseModel):
    restaurant_id: str
    swiped: bool
    direction: SwipeDirection | None = None


class LikeStatus(BaseModel):
    restaurant_id: str
    is_liked: bool
