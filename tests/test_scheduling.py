# tests/test_scheduling.py

from datetime import datetime, timedelta, timezone

from conftest import wait_until

from core.countdown import TimerItem
from core.scheduling import CountdownTicker, DelayedAction

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def test_delayed_action_runs_once(qapp):
    calls = []
    action = DelayedAction(10)
    action.start(lambda: calls.append(1))
    assert action.is_pending()
    assert wait_until(lambda: calls == [1])
    assert not action.is_pending()


def test_delayed_action_cancel_prevents_callback(qapp):
    calls = []
    action = DelayedAction(20)
    action.start(lambda: calls.append(1))
    action.cancel()
    wait_until(lambda: False, timeout_ms=80)
    assert calls == []


def test_delayed_action_restart_replaces_callback(qapp):
    calls = []
    action = DelayedAction(10)
    action.start(lambda: calls.append("first"))
    action.start(lambda: calls.append("second"))
    assert wait_until(lambda: calls)
    wait_until(lambda: False, timeout_ms=50)
    assert calls == ["second"]


def test_ticker_emits_completion_once(qapp):
    clock = FakeClock(T0)
    timer = TimerItem(id="t", target=T0 + timedelta(seconds=2), created_at=T0)
    ticker = CountdownTicker(lambda: [timer], clock=clock)

    ticks, done = [], []
    ticker.ticked.connect(ticks.append)
    ticker.timerCompleted.connect(done.append)

    for _ in range(5):
        ticker.tick()
        clock.advance(1)

    assert len(ticks) == 5
    assert done == [timer]


def test_ticker_start_seeds_baseline_and_stop(qapp):
    clock = FakeClock(T0)
    timer = TimerItem(id="t", target=T0 + timedelta(milliseconds=500), created_at=T0)
    ticker = CountdownTicker(lambda: [timer], clock=clock, interval_ms=1000)
    done = []
    ticker.timerCompleted.connect(done.append)

    ticker.start()
    assert ticker.is_running()
    clock.advance(1)
    ticker.tick()
    ticker.stop()
    assert not ticker.is_running()
    assert done == [timer]
