from __future__ import annotations

import time

from pydantic import BaseModel, Field

from ..catalog.models import RestaurantRef


class SelectedRestaurant(BaseModel):
    user_id: str
    restaurant: RestaurantRef
    timestamp: float = Field(default_factory=time.time)


class WinnerEntry(BaseModel):
    user_id: str
    restaurant_id: str
    restaurant: RestaurantRef
    timestamp: float = Field(default_factory=time.time)


class StartTournamentRequest(BaseModel):
    restaurant_ids: list[str] | None = Field(
        default=None,
        description="Subset of favorites to compete; all favorites when omitted",
    )


class ChoiceRequest(BaseModel):
    choice: int = Field(..., ge=0, le=1)


class TournamentState(BaseModel):
    round: int
    total_rounds: int
    comparisons: int
    remaining: int
    pair: list[RestaurantRef] | None = None
    finished: bool = False
    winner: RestaurantRef | None = None
