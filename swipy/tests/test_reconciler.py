from __future__ import annotations

from datetime import datetime, timedelta, timezone

from swipy.notifications.models import Notification, NotificationType
from swipy.notifications.reconciler import (
    local_notification,
    reconcile,
    semantic_target,
    should_surface,
    unread_count,
)

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _n(nid: str, minutes: int, type_=NotificationType.message, read=False, **data) -> Notification:
    return Notification(
        id=nid,
        type=type_,
        message=f"notification {nid}",
        created_at=BASE + timedelta(minutes=minutes),
        read=read,
        data=data,
    )


def _ids(items):
    return [n.id for n in items]


def test_two_new_entries_collapse_into_summary():
    n1, n2, n3 = _n("n1", 1), _n("n2", 2), _n("n3", 3)
    result = reconcile([n1], [n1, n2, n3])
    assert _ids(result.merged) == ["n3", "n2", "n1"]
    assert len(result.to_surface) == 1
    summary = result.to_surface[0]
    assert summary.type is NotificationType.summary
    assert summary.local
    assert summary.data["count"] == 2
    assert sorted(result.new_ids) == ["n2", "n3"]


def test_summary_is_not_cached():
    result = reconcile([], [_n("n1", 1), _n("n2", 2), _n("n3", 3), _n("n4", 4)])
    assert len(result.to_surface) == 1
    assert result.to_surface[0].id not in _ids(result.merged)


def test_single_new_entry_surfaces_as_is():
    n1, n2 = _n("n1", 1), _n("n2", 2)
    result = reconcile([n1], [n2, n1])
    assert result.to_surface == [n2]


def test_nothing_new_surfaces_nothing():
    n1 = _n("n1", 1)
    result = reconcile([n1], [n1])
    assert result.to_surface == []
    assert _ids(result.merged) == ["n1"]


def test_replaying_server_list_never_duplicates():
    server = [_n("n3", 3), _n("n2", 2), _n("n1", 1), _n("n2", 2)]
    cache = []
    for _ in range(3):
        cache = reconcile(cache, server).merged
        assert len(_ids(cache)) == len(set(_ids(cache))) == 3
    assert reconcile(cache, server).to_surface == []


def test_local_only_entries_survive_merge():
    local = local_notification(NotificationType.system, "saved offline")
    local = local.model_copy(update={"created_at": BASE + timedelta(minutes=5)})
    result = reconcile([local], [_n("n1", 1)])
    assert _ids(result.merged) == [local.id, "n1"]


def test_stale_server_entries_are_dropped_from_cache():
    gone = _n("gone", 1)
    result = reconcile([gone], [_n("n2", 2)])
    assert _ids(result.merged) == ["n2"]


def test_local_read_state_is_kept():
    cached = _n("n1", 1, read=True)
    result = reconcile([cached], [_n("n1", 1, read=False)])
    assert result.merged[0].read


def test_cap_drops_oldest_regardless_of_read_state():
    server = [_n(f"n{i}", i, read=(i % 2 == 0)) for i in range(10)]
    result = reconcile([], server, cap=4)
    assert _ids(result.merged) == ["n9", "n8", "n7", "n6"]
    assert sorted(result.new_ids) == ["n6", "n7", "n8", "n9"]


def test_entry_trimmed_by_cap_is_not_surfaced_on_every_poll():
    local = local_notification(NotificationType.system, "saved offline")
    local = local.model_copy(update={"created_at": BASE + timedelta(minutes=10)})
    server = [_n("n2", 2), _n("n1", 1), _n("n0", 0)]
    cache = reconcile([local], server, cap=3).merged
    assert _ids(cache) == [local.id, "n2", "n1"]

    for _ in range(3):
        result = reconcile(cache, server, cap=3)
        assert result.to_surface == []
        assert result.new_ids == []
        cache = result.merged
    assert _ids(cache) == [local.id, "n2", "n1"]


def test_unread_count():
    cache = [_n("a", 1), _n("b", 2, read=True), _n("c", 3)]
    assert unread_count(cache) == 2
    assert unread_count([]) == 0


def test_message_for_open_chat_is_suppressed():
    msg = _n("m", 1, NotificationType.message, friend_id="bob")
    assert semantic_target(msg) == ("chat", "bob")
    assert not should_surface(msg, ("chat", "bob"))
    assert should_surface(msg, ("chat", "carol"))
    assert should_surface(msg, None)


def test_untargeted_notification_always_surfaces():
    summary = _n("s", 1, NotificationType.summary)
    assert semantic_target(summary) is None
    assert should_surface(summary, ("chat", "bob"))
