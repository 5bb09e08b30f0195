# tests/test_countdown.py

from datetime import datetime, timedelta, timezone

import pytest

from core.countdown import (
    CompletionTracker,
    TimerItem,
    TimerState,
    format_countdown,
    new_timer,
    parse_iso,
    remaining_ms,
    split_duration,
    state_of,
    to_iso,
)
from services.timers import TIMERS_CAPACITY, TIMERS_KEY, TimerList

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _timer(seconds_from_t0, timer_id="a"):
    return TimerItem(id=timer_id, target=T0 + timedelta(seconds=seconds_from_t0), created_at=T0, title="Tea")


# ---------------- remaining / split ----------------

def test_remaining_is_recomputed_from_timestamps():
    t = _timer(90)
    assert remaining_ms(t.target, T0) == 90_000
    assert remaining_ms(t.target, T0 + timedelta(seconds=100)) == -10_000


def test_naive_datetimes_are_treated_as_utc():
    assert remaining_ms(datetime(2026, 1, 1, 12, 0, 5), T0) == 5_000


def test_split_duration():
    assert split_duration(93_784_000) == (1, 2, 3, 4)
    assert split_duration(999) == (0, 0, 0, 0)
    assert split_duration(-5_000) == (0, 0, 0, 0)


def test_format_countdown():
    assert format_countdown(93_784_000) == "1d 02:03:04"
    assert format_countdown(61_000) == "00:01:01"
    assert format_countdown(-1) == "00:00:00"


def test_state_of():
    t = _timer(1)
    assert state_of(t, T0) is TimerState.PENDING
    assert state_of(t, T0 + timedelta(seconds=1)) is TimerState.COMPLETED


# ---------------- completion detection ----------------

def test_completion_fires_exactly_once():
    tracker = CompletionTracker()
    t = _timer(2)
    fired = []
    for s in range(6):
        fired += tracker.tick([t], T0 + timedelta(seconds=s))
    assert fired == [t]


def test_already_expired_timer_does_not_fire():
    tracker = CompletionTracker()
    t = _timer(-60)
    assert tracker.tick([t], T0) == []
    assert tracker.tick([t], T0 + timedelta(seconds=1)) == []


def test_changed_target_resets_baseline():
    tracker = CompletionTracker()
    t = _timer(1)
    tracker.tick([t], T0)
    assert tracker.tick([t], T0 + timedelta(seconds=2)) == [t]

    moved = t.with_target(T0 + timedelta(seconds=4))
    assert tracker.tick([moved], T0 + timedelta(seconds=3)) == []
    assert tracker.tick([moved], T0 + timedelta(seconds=5)) == [moved]


def test_removed_timer_is_forgotten():
    tracker = CompletionTracker()
    t = _timer(1)
    tracker.tick([t], T0)
    tracker.tick([], T0)
    # re-added after expiry: no baseline, so no fire
    assert tracker.tick([t], T0 + timedelta(seconds=2)) == []


def test_independent_timers_fire_independently():
    tracker = CompletionTracker()
    a, b = _timer(1, "a"), _timer(3, "b")
    tracker.tick([a, b], T0)
    assert tracker.tick([a, b], T0 + timedelta(seconds=2)) == [a]
    assert tracker.tick([a, b], T0 + timedelta(seconds=4)) == [b]


# ---------------- record / storage ----------------

def test_iso_round_trip():
    assert to_iso(T0) == "2026-01-01T12:00:00.000Z"
    assert parse_iso("2026-01-01T12:00:00.000Z") == T0


def test_timer_dict_round_trip_omits_unset_fields():
    t = new_timer(T0, title="  Launch ", now=T0)
    d = t.to_dict()
    assert d["title"] == "Launch"
    assert "description" not in d
    assert d["soundEnabled"] is True
    assert TimerItem.from_dict(d) == t


def test_timer_list_add_replace_remove(store):
    timers = TimerList(store)
    a, b = _timer(10, "a"), _timer(20, "b")
    timers.add(a)
    timers.add(b)
    assert [t.id for t in timers.items] == ["b", "a"]

    assert timers.replace(a.with_target(T0 + timedelta(seconds=30))) is True
    assert timers.replace(_timer(1, "zzz")) is False
    assert TimerList(store).get("a").target == T0 + timedelta(seconds=30)

    assert timers.remove("b") is True
    assert timers.remove("b") is False
    assert [t.id for t in TimerList(store).items] == ["a"]


def test_timer_list_skips_unreadable_records(store):
    store.save(TIMERS_KEY, [
        {"id": "ok", "targetTime": "2026-01-01T12:00:00.000Z"},
        {"id": "bad", "targetTime": "not a date"},
        {"targetTime": "2026-01-01T12:00:00.000Z"},
    ])
    assert [t.id for t in TimerList(store).items] == ["ok"]


def test_timer_list_clear(store):
    timers = TimerList(store)
    timers.add(_timer(5))
    timers.clear()
    assert store.load(TIMERS_KEY) == []


def test_timer_list_keeps_newest_fifty(store):
    timers = TimerList(store)
    for i in range(TIMERS_CAPACITY + 1):
        timers.add(_timer(i, f"t{i}"))
    assert TIMERS_CAPACITY == 50
    assert len(timers.items) == TIMERS_CAPACITY
    assert timers.items[0].id == f"t{TIMERS_CAPACITY}"
    assert timers.get("t0") is None

    reloaded = TimerList(store)
    assert [t.id for t in reloaded.items] == [t.id for t in timers.items]


@pytest.mark.parametrize("minutes", [1, 45])
def test_new_timer_ids_are_unique(minutes):
    a = new_timer(T0 + timedelta(minutes=minutes), now=T0)
    b = new_timer(T0 + timedelta(minutes=minutes), now=T0)
    assert a.id != b.id
