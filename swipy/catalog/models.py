from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class RestaurantRef(BaseModel):
    """Snapshot of a catalog restaurant. Identity is ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    image: str | None = None
    cuisine: str | None = None
    price_range: str | None = None
    rating: float | None = None
    location: str | None = None


class CatalogQuery(BaseModel):
    location: str = "New York"
    cuisine: str | None = None
    price: str | None = None
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    radius: int = Field(default=5000, ge=1)
    open_now: bool = False
    dietary: list[str] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class CatalogClient(Protocol):
    def search(self, query: CatalogQuery) -> list[RestaurantRef]: ...
