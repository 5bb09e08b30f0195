# core/countdown.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

TICK_INTERVAL_MS = 1000
PRESET_MINUTES = (1, 3, 5, 10, 15, 20, 25, 30, 45)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def parse_iso(text: str) -> datetime:
    # fromisoformat on older interpreters rejects the trailing Z
    s = text.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return _aware(datetime.fromisoformat(s))


def to_iso(dt: datetime) -> str:
    return _aware(dt).astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# --------------------------- Timer record ---------------------------

@dataclass(frozen=True)
class TimerItem:
    id: str
    target: datetime
    created_at: datetime
    title: Optional[str] = None
    description: Optional[str] = None
    sound_enabled: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "target", _aware(self.target))
        object.__setattr__(self, "created_at", _aware(self.created_at))

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "targetTime": to_iso(self.target),
            "createdAt": to_iso(self.created_at),
        }
        if self.title is not None:
            out["title"] = self.title
        if self.description is not None:
            out["description"] = self.description
        if self.sound_enabled is not None:
            out["soundEnabled"] = self.sound_enabled
        return out

    @staticmethod
    def from_dict(data: dict) -> "TimerItem":
        """Raises ValueError when the target time is unreadable."""
        target = parse_iso(str(data["targetTime"]))
        created_raw = data.get("createdAt")
        try:
            created = parse_iso(created_raw) if created_raw else target
        except ValueError:
            created = target
        return TimerItem(
            id=str(data["id"]),
            target=target,
            created_at=created,
            title=data.get("title"),
            description=data.get("description"),
            sound_enabled=data.get("soundEnabled"),
        )

    def with_target(self, target: datetime) -> "TimerItem":
        return replace(self, target=_aware(target))


def new_timer(
    target: datetime,
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    sound_enabled: Optional[bool] = True,
    now: Optional[datetime] = None,
) -> TimerItem:
    return TimerItem(
        id=uuid.uuid4().hex,
        target=target,
        created_at=now or utc_now(),
        title=(title or "").strip() or None,
        description=(description or "").strip() or None,
        sound_enabled=sound_enabled,
    )


# --------------------------- Remaining time ---------------------------

class TimerState(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class CountdownParts(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int


def remaining_ms(target: datetime, now: datetime) -> float:
    """Always recomputed from wall-clock timestamps, never accumulated."""
    return (_aware(target) - _aware(now)).total_seconds() * 1000.0


def state_of(timer: TimerItem, now: datetime) -> TimerState:
    return TimerState.PENDING if remaining_ms(timer.target, now) > 0 else TimerState.COMPLETED


def split_duration(ms: float) -> CountdownParts:
    total = max(0, int(ms // 1000))
    return CountdownParts(
        days=total // 86400,
        hours=(total % 86400) // 3600,
        minutes=(total % 3600) // 60,
        seconds=total % 60,
    )


def format_countdown(ms: float) -> str:
    d, h, m, s = split_duration(ms)
    prefix = f"{d}d " if d > 0 else ""
    return f"{prefix}{h:02d}:{m:02d}:{s:02d}"


# --------------------------- Completion detection ---------------------------

class CompletionTracker:
    """
    Detects Pending -> Completed crossings across ticks.

    Remembers, per timer id, the target and the remaining time seen on the
    previous tick. A timer fires only when the previous tick saw it pending
    and this tick sees it completed, so later ticks never re-fire. Changing
    a timer's target starts a fresh baseline.
    """

    def __init__(self):
        self._last: Dict[str, Tuple[datetime, float]] = {}

    def tick(self, timers: Iterable[TimerItem], now: datetime) -> List[TimerItem]:
        fired: List[TimerItem] = []
        seen = set()
        for t in timers:
            seen.add(t.id)
            rem = remaining_ms(t.target, now)
            prev = self._last.get(t.id)
            if prev is not None and prev[0] == t.target and prev[1] > 0 and rem <= 0:
                fired.append(t)
            self._last[t.id] = (t.target, rem)
        for gone in set(self._last) - seen:
            del self._last[gone]
        return fired

    def forget(self, timer_id: str) -> None:
        self._last.pop(timer_id, None)

    def reset(self) -> None:
        self._last.clear()
