from __future__ import annotations

import logging
import random
from typing import Iterable

from ..catalog.models import RestaurantRef
from ..ledger.store import validate_id
from .engine import TournamentSession
from .models import SelectedRestaurant, WinnerEntry

logger = logging.getLogger(__name__)

_selected: dict[str, SelectedRestaurant] = {}
_winners: dict[str, dict[str, WinnerEntry]] = {}
_sessions: dict[str, TournamentSession] = {}


# ---------------------------------------------------------------------------
# Selection and winner history
# ---------------------------------------------------------------------------


def set_selected_restaurant(user_id: str, restaurant: RestaurantRef) -> SelectedRestaurant:
    validate_id(user_id, "user id")
    selection = SelectedRestaurant(user_id=user_id, restaurant=restaurant)
    _selected[user_id] = selection
    return selection


def get_selected_restaurant(user_id: str) -> SelectedRestaurant | None:
    return _selected.get(user_id)


def record_winner(user_id: str, restaurant: RestaurantRef) -> WinnerEntry:
    """Append to the winner history; a repeat winner is refreshed and moved to the front."""
    validate_id(user_id, "user id")
    history = _winners.setdefault(user_id, {})
    history.pop(restaurant.id, None)
    entry = WinnerEntry(user_id=user_id, restaurant_id=restaurant.id, restaurant=restaurant)
    history[restaurant.id] = entry
    return entry


def tournament_winners(user_id: str) -> list[WinnerEntry]:
    """Return the user's past winners, newest first, one per restaurant."""
    return list(reversed(_winners.get(user_id, {}).values()))


def finish_tournament(user_id: str, winner: RestaurantRef) -> SelectedRestaurant:
    selection = set_selected_restaurant(user_id, winner)
    record_winner(user_id, winner)
    logger.info("User %s selected restaurant %s", user_id, winner.id)
    return selection


# ---------------------------------------------------------------------------
# Active sessions (one per user, in memory only)
# ---------------------------------------------------------------------------


def start_session(
    user_id: str,
    contenders: Iterable[RestaurantRef],
    rng: random.Random | None = None,
) -> TournamentSession:
    """Start a tournament for *user_id*, replacing any unfinished one.

    Raises ``InsufficientContenders`` without touching the current session.
    """
    validate_id(user_id, "user id")
    session = TournamentSession.start(contenders, rng=rng)
    _sessions[user_id] = session
    return session


def get_session(user_id: str) -> TournamentSession | None:
    return _sessions.get(user_id)


def choose(user_id: str, choice_index: int) -> TournamentSession | None:
    """Apply a choice to the user's session, persisting the winner when it finishes."""
    session = _sessions.get(user_id)
    if session is None:
        return None
    session.resolve(choice_index, on_finish=lambda winner: finish_tournament(user_id, winner))
    return session


def clear_tournaments() -> None:
    _selected.clear()
    _winners.clear()
    _sessions.clear()
