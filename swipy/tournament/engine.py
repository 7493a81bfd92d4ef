from __future__ import annotations

import logging
import math
import random
import threading
from collections import deque
from typing import Callable, Iterable

from ..catalog.models import RestaurantRef
from .models import TournamentState

logger = logging.getLogger(__name__)


class TournamentError(Exception):
    pass


class InsufficientContenders(TournamentError):
    def __init__(self, count: int):
        super().__init__("Need at least 2 favorites to start a tournament")
        self.count = count


class InvalidChoice(TournamentError):
    pass


class SessionBusy(TournamentError):
    pass


class TournamentFinished(TournamentError):
    pass


class TournamentSession:
    """One user's bracket. A second ``resolve`` while one is running raises ``SessionBusy``."""

    def __init__(self, contenders: list[RestaurantRef], total_rounds: int):
        self._queue: deque[RestaurantRef] = deque(contenders)
        self.round = 1
        self.total_rounds = total_rounds
        self.comparisons = 0
        # Contenders of the current round that have not played yet
        self._round_left = len(contenders)
        self._lock = threading.Lock()

    @classmethod
    def start(
        cls,
        contenders: Iterable[RestaurantRef],
        rng: random.Random | None = None,
    ) -> "TournamentSession":
        unique: dict[str, RestaurantRef] = {}
        for restaurant in contenders:
            unique.setdefault(restaurant.id, restaurant)
        seeded = list(unique.values())
        if len(seeded) < 2:
            raise InsufficientContenders(len(seeded))

        (rng or random).shuffle(seeded)
        total_rounds = math.ceil(math.log2(len(seeded)))
        logger.info("Tournament started with %d contenders", len(seeded))
        return cls(seeded, total_rounds)

    @property
    def contenders(self) -> list[RestaurantRef]:
        return list(self._queue)

    @property
    def finished(self) -> bool:
        return len(self._queue) == 1

    @property
    def winner(self) -> RestaurantRef | None:
        return self._queue[0] if self.finished else None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def pair(self) -> tuple[RestaurantRef, RestaurantRef] | None:
        if self.finished:
            return None
        return self._queue[0], self._queue[1]

    def resolve(
        self,
        choice_index: int,
        on_finish: Callable[[RestaurantRef], None] | None = None,
    ) -> RestaurantRef | None:
        """Keep ``pair()[choice_index]`` and drop the other contender.

        Returns the winner once the session finishes, otherwise ``None``.
        *on_finish* runs exactly once, while the session is still marked
        busy.
        """
        if choice_index not in (0, 1):
            raise InvalidChoice(f"Choice must be 0 or 1, got {choice_index!r}")
        if not self._lock.acquire(blocking=False):
            raise SessionBusy("A choice is already being applied to this tournament")
        try:
            if self.finished:
                raise TournamentFinished("Tournament already has a winner")

            first = self._queue.popleft()
            second = self._queue.popleft()
            chosen = first if choice_index == 0 else second
            self._queue.append(chosen)
            self.comparisons += 1

            self._round_left = max(self._round_left - 2, 0)
            if self._round_left <= 1 and not self.finished:
                self.round += 1
                self._round_left = len(self._queue)

            if not self.finished:
                return None

            winner = self._queue[0]
            logger.info(
                "Tournament finished after %d comparisons, winner=%s",
                self.comparisons, winner.id,
            )
            if on_finish is not None:
                on_finish(winner)
            return winner
        finally:
            self._lock.release()

    def state(self) -> TournamentState:
        current = self.pair()
        return TournamentState(
            round=self.round,
            total_rounds=self.total_rounds,
            comparisons=self.comparisons,
            remaining=len(self._queue),
            pair=list(current) if current else None,
            finished=self.finished,
            winner=self.winner,
        )
