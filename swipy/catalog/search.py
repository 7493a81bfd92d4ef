from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..config import DEFAULT_SETTINGS
from .cache import CatalogCache
from .data_store import get_dataframe
from .models import CatalogQuery, RestaurantRef

logger = logging.getLogger(__name__)


def _row_to_ref(row: pd.Series) -> RestaurantRef:
    rating = row.get("rating")
    image = row.get("image")
    return RestaurantRef(
        id=str(row["id"]),
        name=row["name"],
        image=image if pd.notna(image) else None,
        cuisine=row["cuisine"] if pd.notna(row.get("cuisine")) else None,
        price_range=row["price_range"] if pd.notna(row.get("price_range")) else None,
        rating=float(rating) if pd.notna(rating) else None,
        location=row["location"] if pd.notna(row.get("location")) else None,
    )


class LocalCatalog:
    """Catalog backed by a CSV restaurant table."""

    def __init__(
        self,
        csv_path: Path = DEFAULT_SETTINGS.catalog_csv,
        use_cache: bool = True,
        cache: CatalogCache | None = None,
    ):
        self.csv_path = csv_path
        self.use_cache = use_cache
        self.cache = cache if cache is not None else CatalogCache()

    def search(self, query: CatalogQuery) -> list[RestaurantRef]:
        if self.use_cache:
            cached = self.cache.get(query)
            if cached is not None:
                return cached

        df = get_dataframe(self.csv_path)

        # --- Hard filters ---
        mask = pd.Series(True, index=df.index)
        if query.location:
            mask = mask & df["location_lower"].str.contains(
                query.location.strip().lower(), na=False, regex=False,
            )
        if query.cuisine:
            mask = mask & df["cuisine_lower"].str.contains(
                query.cuisine.strip().lower(), na=False, regex=False,
            )
        if query.price:
            mask = mask & (df["price_range"] == query.price)
        if query.rating > 0:
            mask = mask & (df["rating"] >= query.rating)
        if query.open_now:
            mask = mask & df["open_now"]
        if query.dietary:
            wanted = {d.strip().lower() for d in query.dietary}
            mask = mask & df["dietary_list"].apply(lambda dl: wanted <= set(dl))

        matched = df.loc[mask]
        start = (query.page - 1) * query.page_size
        page = matched.iloc[start:start + query.page_size]
        results = [_row_to_ref(row) for _, row in page.iterrows()]

        logger.debug(
            "Catalog search location=%s matched=%d page=%d returned=%d",
            query.location, len(matched), query.page, len(results),
        )
        if self.use_cache:
            self.cache.set(query, results)
        return results
