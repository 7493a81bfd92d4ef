from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .catalog.models import CatalogClient, CatalogQuery, RestaurantRef
from .catalog.search import LocalCatalog
from .ledger.candidates import build_candidates
from .ledger.models import (
    FavoriteRecord,
    LikeStatus,
    SwipeDirection,
    SwipeRecord,
    SwipeRequest,
    SwipeStatus,
)
from .ledger.store import (
    InvalidIdentifier,
    add_favorite,
    clear_swipe_history,
    favorites_for_user,
    get_swipe,
    is_favorite,
    record_swipe,
    reset_favorites,
    unlike,
    validate_id,
)
from .notifications.models import Notification, NotificationCreate, NotificationType
from .notifications.store import (
    NotificationForbidden,
    NotificationNotFound,
    clear_user_notifications,
    create_notification,
    delete_notification,
    list_notifications,
    mark_all_read,
    mark_read,
)
from .social.friends import (
    FriendshipExists,
    add_friend,
    friends_of,
    get_profile,
    list_users,
    remove_friend,
)
from .social.matches import matches_for_restaurant, matches_for_user
from .social.models import (
    FriendEdge,
    FriendRequest,
    MatchEntry,
    RestaurantMatches,
    StatusQuery,
    StatusUpdate,
    UserProfile,
    UserStatus,
)
from .social.presence import statuses, touch_last_swiped, update_status
from .tournament.engine import InsufficientContenders, TournamentError
from .tournament.models import (
    ChoiceRequest,
    SelectedRestaurant,
    StartTournamentRequest,
    TournamentState,
    WinnerEntry,
)
from .tournament.store import (
    choose,
    get_selected_restaurant,
    get_session,
    record_winner,
    set_selected_restaurant,
    start_session,
    tournament_winners,
)

app = FastAPI(title="Swipy API", version="1.0.0")

_default_catalog = LocalCatalog()


def get_catalog() -> CatalogClient:
    return _default_catalog


# ── Error mapping ────────────────────────────────────────────────────────


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.__class__.__name__, "detail": str(exc)},
    )


@app.exception_handler(InvalidIdentifier)
async def invalid_identifier_handler(request: Request, exc: InvalidIdentifier) -> JSONResponse:
    return _error(400, exc)


@app.exception_handler(TournamentError)
async def tournament_error_handler(request: Request, exc: TournamentError) -> JSONResponse:
    status_code = 400 if isinstance(exc, InsufficientContenders) else 409
    return _error(status_code, exc)


@app.exception_handler(FriendshipExists)
async def friendship_exists_handler(request: Request, exc: FriendshipExists) -> JSONResponse:
    return _error(409, exc)


@app.exception_handler(NotificationNotFound)
async def notification_not_found_handler(request: Request, exc: NotificationNotFound) -> JSONResponse:
    return _error(404, exc)


@app.exception_handler(NotificationForbidden)
async def notification_forbidden_handler(request: Request, exc: NotificationForbidden) -> JSONResponse:
    return _error(403, exc)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/restaurants", response_model=list[RestaurantRef])
def restaurants(
    location: str = "New York",
    cuisine: str | None = None,
    price: str | None = None,
    rating: float = Query(default=0.0, ge=0.0, le=5.0),
    radius: int = Query(default=5000, ge=1),
    open_now: bool = False,
    dietary: list[str] = Query(default=[]),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    user_id: str | None = None,
    catalog: CatalogClient = Depends(get_catalog),
) -> list[RestaurantRef]:
    query = CatalogQuery(
        location=location,
        cuisine=cuisine,
        price=price,
        rating=rating,
        radius=radius,
        open_now=open_now,
        dietary=dietary,
        page=page,
        page_size=page_size,
    )
    results = catalog.search(query)
    if user_id:
        return build_candidates(user_id, results)
    return results


@app.get("/restaurants/cache/stats")
def catalog_cache_stats() -> dict:
    return _default_catalog.cache.stats()


@app.get("/users", response_model=list[UserProfile])
def users() -> list[UserProfile]:
    return list_users()


# ── Swipes & favorites ───────────────────────────────────────────────────


@app.post("/users/{user_id}/swipes", response_model=SwipeRecord)
def swipe(user_id: str, body: SwipeRequest) -> SwipeRecord:
    was_favorite = is_favorite(user_id, body.restaurant_id)
    record = record_swipe(user_id, body.restaurant_id, body.direction, body.restaurant)
    touch_last_swiped(user_id)

    # A fresh like can create matches; tell both sides.
    if record.direction is SwipeDirection.like and not was_favorite:
        _notify_new_matches(user_id, body.restaurant)
    return record


def _notify_new_matches(user_id: str, restaurant: RestaurantRef) -> None:
    for friend_id in sorted(matches_for_restaurant(user_id, restaurant.id)):
        friend = get_profile(friend_id)
        me = get_profile(user_id)
        create_notification(NotificationCreate(
            user_id=user_id,
            type=NotificationType.match,
            message=f"You and {friend.name} both liked {restaurant.name}!",
            data={"friend_id": friend_id, "restaurant_id": restaurant.id},
        ))
        create_notification(NotificationCreate(
            user_id=friend_id,
            type=NotificationType.match,
            message=f"You and {me.name} both liked {restaurant.name}!",
            data={"friend_id": user_id, "restaurant_id": restaurant.id},
        ))


@app.get("/users/{user_id}/swipes/{restaurant_id}", response_model=SwipeStatus)
def swipe_status(user_id: str, restaurant_id: str) -> SwipeStatus:
    record = get_swipe(user_id, restaurant_id)
    return SwipeStatus(
        restaurant_id=restaurant_id,
        swiped=record is not None,
        direction=record.direction if record else None,
    )


@app.delete("/users/{user_id}/swipes")
def clear_swipes(user_id: str) -> dict:
    return {"success": True, "removed": clear_swipe_history(user_id)}


@app.get("/users/{user_id}/favorites", response_model=list[FavoriteRecord])
def favorites(user_id: str) -> list[FavoriteRecord]:
    return favorites_for_user(user_id)


@app.get("/users/{user_id}/favorites/{restaurant_id}", response_model=LikeStatus)
def favorite_status(user_id: str, restaurant_id: str) -> LikeStatus:
    return LikeStatus(restaurant_id=restaurant_id, is_liked=is_favorite(user_id, restaurant_id))


@app.post("/users/{user_id}/favorites", response_model=FavoriteRecord)
def create_favorite(user_id: str, body: RestaurantRef) -> FavoriteRecord:
    return add_favorite(user_id, body)


@app.delete("/users/{user_id}/favorites/{restaurant_id}", response_model=FavoriteRecord)
def remove_favorite(user_id: str, restaurant_id: str) -> FavoriteRecord:
    removed = unlike(user_id, restaurant_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="Like not found")
    return removed


@app.delete("/users/{user_id}/favorites")
def clear_favorites(user_id: str) -> dict:
    return {"success": True, "removed": reset_favorites(user_id)}


# ── Friends & matches ────────────────────────────────────────────────────


@app.get("/users/{user_id}/friends", response_model=list[UserProfile])
def friends(user_id: str) -> list[UserProfile]:
    return friends_of(user_id)


@app.post("/users/{user_id}/friends", response_model=FriendEdge)
def befriend(user_id: str, body: FriendRequest) -> FriendEdge:
    return add_friend(user_id, body.friend_id)


@app.delete("/users/{user_id}/friends/{friend_id}")
def unfriend(user_id: str, friend_id: str) -> dict:
    return {"success": True, "removed": remove_friend(user_id, friend_id)}


@app.get("/users/{user_id}/matches", response_model=list[MatchEntry])
def user_matches(user_id: str) -> list[MatchEntry]:
    return matches_for_user(user_id)


@app.get("/users/{user_id}/matches/{restaurant_id}", response_model=RestaurantMatches)
def restaurant_matches(user_id: str, restaurant_id: str) -> RestaurantMatches:
    matched = matches_for_restaurant(user_id, restaurant_id)
    return RestaurantMatches(restaurant_id=restaurant_id, matches=sorted(matched))


# ── Presence ─────────────────────────────────────────────────────────────


@app.put("/users/{user_id}/status", response_model=UserStatus)
def put_status(user_id: str, body: StatusUpdate) -> UserStatus:
    validate_id(user_id, "user id")
    return update_status(user_id, body.is_online)


@app.post("/users/status", response_model=list[UserStatus])
def get_statuses(body: StatusQuery) -> list[UserStatus]:
    return statuses(body.user_ids)


# ── Tournament ───────────────────────────────────────────────────────────


@app.post("/users/{user_id}/tournament", response_model=TournamentState)
def start_tournament(user_id: str, body: StartTournamentRequest | None = None) -> TournamentState:
    saved = favorites_for_user(user_id)
    if body is not None and body.restaurant_ids is not None:
        wanted = set(body.restaurant_ids)
        saved = [f for f in saved if f.restaurant_id in wanted]
    session = start_session(user_id, [f.restaurant for f in saved])
    return session.state()


@app.get("/users/{user_id}/tournament", response_model=TournamentState)
def tournament_state(user_id: str) -> TournamentState:
    session = get_session(user_id)
    if session is None:
        raise HTTPException(status_code=404, detail="No tournament in progress")
    return session.state()


@app.post("/users/{user_id}/tournament/choice", response_model=TournamentState)
def tournament_choice(user_id: str, body: ChoiceRequest) -> TournamentState:
    session = choose(user_id, body.choice)
    if session is None:
        raise HTTPException(status_code=404, detail="No tournament in progress")
    return session.state()


@app.get("/users/{user_id}/selected-restaurant", response_model=SelectedRestaurant)
def selected_restaurant(user_id: str) -> SelectedRestaurant:
    selection = get_selected_restaurant(user_id)
    if selection is None:
        raise HTTPException(status_code=404, detail="No restaurant selected")
    return selection


@app.post("/users/{user_id}/selected-restaurant", response_model=SelectedRestaurant)
def save_selected_restaurant(user_id: str, body: RestaurantRef) -> SelectedRestaurant:
    selection = set_selected_restaurant(user_id, body)
    record_winner(user_id, body)
    return selection


@app.get("/users/{user_id}/tournament-winners", response_model=list[WinnerEntry])
def winners(user_id: str) -> list[WinnerEntry]:
    return tournament_winners(user_id)


# ── Notifications ────────────────────────────────────────────────────────


@app.get("/notifications/user/{user_id}", response_model=list[Notification])
def user_notifications(user_id: str) -> list[Notification]:
    return list_notifications(user_id)


@app.post("/notifications", response_model=Notification, status_code=201)
def post_notification(body: NotificationCreate) -> Notification:
    if body.type is NotificationType.summary:
        raise HTTPException(status_code=400, detail="Summary notifications are client-side only")
    return create_notification(body)


@app.put("/notifications/user/{user_id}/read-all")
def read_all(user_id: str) -> dict:
    return {"success": True, "modified": mark_all_read(user_id)}


@app.put("/notifications/{notification_id}/read", response_model=Notification)
def read_one(notification_id: str) -> Notification:
    return mark_read(notification_id)


@app.delete("/notifications/user/{user_id}/clear-all")
def clear_all(user_id: str) -> dict:
    return {"success": True, "deleted": clear_user_notifications(user_id)}


@app.delete("/notifications/{notification_id}")
def delete_one(notification_id: str, user_id: str = Query(..., min_length=1)) -> dict:
    delete_notification(notification_id, user_id)
    return {"success": True}
