"""
Per-catalog result cache.

Searches are keyed on the normalized query, so ``"New York"`` and
``" new york "`` share an entry and the dietary filter order does not
matter. Entries live for ``ttl`` seconds; expired ones are swept out
whenever a new page is stored.
"""

from __future__ import annotations

import time
from typing import Callable, Hashable

from ..config import DEFAULT_SETTINGS
from .models import CatalogQuery, RestaurantRef

QueryKey = tuple[Hashable, ...]


def query_key(query: CatalogQuery) -> QueryKey:
    return (
        query.location.strip().lower() if query.location else None,
        query.cuisine.strip().lower() if query.cuisine else None,
        query.price,
        query.rating,
        query.radius,
        query.open_now,
        tuple(sorted({d.strip().lower() for d in query.dietary})),
        query.page,
        query.page_size,
    )


class CatalogCache:
    def __init__(
        self,
        ttl: float = DEFAULT_SETTINGS.catalog_cache_ttl,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[QueryKey, tuple[float, list[RestaurantRef]]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl

    def get(self, query: CatalogQuery) -> list[RestaurantRef] | None:
        key = query_key(query)
        entry = self._entries.get(key)
        if entry is not None and not self._expired(entry[0], self._clock()):
            self.hits += 1
            return list(entry[1])
        self._entries.pop(key, None)
        self.misses += 1
        return None

    def set(self, query: CatalogQuery, results: list[RestaurantRef]) -> None:
        now = self._clock()
        for key in [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]:
            del self._entries[key]
        self._entries[query_key(query)] = (now, list(results))

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "size": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hits / total * 100, 1) if total else 0.0,
        }

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
