# core/scheduling.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from core.countdown import TICK_INTERVAL_MS, CompletionTracker, utc_now

log = logging.getLogger(__name__)


class DelayedAction(QObject):
    """
    Single-shot action bound to its owner's lifetime.

    cancel() (or destroying the owner) guarantees the callback never runs,
    so a slow reveal cannot touch a torn-down widget.
    """
    fired = Signal()

    def __init__(self, delay_ms: int, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._callback: Optional[Callable[[], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(delay_ms))
        self._timer.timeout.connect(self._on_timeout)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    def start(self, callback: Callable[[], None]) -> None:
        """(Re)arm; a pending callback is replaced."""
        self._callback = callback
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def is_pending(self) -> bool:
        return self._timer.isActive()

    def _on_timeout(self) -> None:
        cb, self._callback = self._callback, None
        if cb is None:
            return
        cb()
        self.fired.emit()


class CountdownTicker(QObject):
    """
    1-second heartbeat for the countdown page.

    Each tick reads the current timers, emits ticked(now) for redraws and
    timerCompleted(timer) once per Pending -> Completed crossing.
    """
    ticked = Signal(object)           # datetime
    timerCompleted = Signal(object)   # TimerItem

    def __init__(
        self,
        timers_provider: Callable[[], list],
        parent: Optional[QObject] = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(parent)
        self._timers_provider = timers_provider
        self._clock = clock
        self.tracker = CompletionTracker()
        self._timer = QTimer(self)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self.tick)

    def start(self) -> None:
        # seed the baseline so timers already running get a previous value
        self.tick()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_running(self) -> bool:
        return self._timer.isActive()

    def tick(self) -> None:
        now = self._clock()
        for t in self.tracker.tick(self._timers_provider(), now):
            log.info("CountdownTicker: '%s' completed", t.title or t.id)
            self.timerCompleted.emit(t)
        self.ticked.emit(now)
