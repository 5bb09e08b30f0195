# services/timers.py
from __future__ import annotations

import logging
from typing import List, Optional

from core.countdown import TimerItem
from services.persistence import PreferenceStore
from services.schemas import TIMER_SCHEMA

log = logging.getLogger(__name__)

TIMERS_KEY = "countdown:timers"
TIMERS_CAPACITY = 50


class TimerList:
    """
    Saved countdown timers, newest first.

    Timers are created by add(), swapped whole by replace() and deleted one
    at a time or all at once. Each mutation is written straight through.
    """

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        *,
        key: str = TIMERS_KEY,
        capacity: int = TIMERS_CAPACITY,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self._items: List[TimerItem] = []
        self.reload()

    @property
    def items(self) -> List[TimerItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, timer_id: str) -> Optional[TimerItem]:
        return next((t for t in self._items if t.id == timer_id), None)

    def reload(self) -> None:
        if self.store is None:
            return
        items: List[TimerItem] = []
        for raw in self.store.load_list(self.key, TIMER_SCHEMA):
            try:
                items.append(TimerItem.from_dict(raw))
            except (KeyError, ValueError) as e:
                log.warning("TimerList: skipping unreadable timer %r: %s", raw.get("id"), e)
        self._items = items[: self.capacity]

    def add(self, item: TimerItem) -> None:
        self._items = [item, *(t for t in self._items if t.id != item.id)][: self.capacity]
        self._save()
        log.info("TimerList: added '%s'", item.title or item.id)

    def replace(self, item: TimerItem) -> bool:
        for i, t in enumerate(self._items):
            if t.id == item.id:
                self._items[i] = item
                self._save()
                return True
        return False

    def remove(self, timer_id: str) -> bool:
        kept = [t for t in self._items if t.id != timer_id]
        if len(kept) == len(self._items):
            return False
        self._items = kept
        self._save()
        return True

    def clear(self) -> None:
        self._items = []
        self._save()
        log.info("TimerList: cleared")

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(self.key, [t.to_dict() for t in self._items])
