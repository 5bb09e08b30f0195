# services/history.py
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, List, Optional

from services.persistence import PreferenceStore
from services.schemas import HISTORY_ENTRY_SCHEMA

log = logging.getLogger(__name__)

HISTORY_KEY = "mass:history"
HISTORY_CAPACITY = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HistoryEntry:
    value: str
    from_unit: str
    to_unit: str
    timestamp_ms: int = 0

    def same_action(self, other: "HistoryEntry") -> bool:
        return (self.value, self.from_unit, self.to_unit) == (other.value, other.from_unit, other.to_unit)

    def to_dict(self) -> dict:
        return {"v": self.value, "from": self.from_unit, "to": self.to_unit, "ts": self.timestamp_ms}

    @staticmethod
    def from_dict(data: dict) -> "HistoryEntry":
        ts = data.get("ts", 0)
        return HistoryEntry(
            value=str(data.get("v", "")),
            from_unit=str(data["from"]),
            to_unit=str(data["to"]),
            timestamp_ms=int(ts) if isinstance(ts, (int, float)) and math.isfinite(ts) else 0,
        )


class ConversionHistory:
    """
    Newest-first ring buffer of conversions.

    A new entry is skipped only when it repeats the most recent one; values
    that come back later in the chain are recorded again.
    """

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        *,
        key: str = HISTORY_KEY,
        capacity: int = HISTORY_CAPACITY,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self._entries: List[HistoryEntry] = []
        self.reload()

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def reload(self) -> None:
        """Persisted copy replaces whatever is in memory."""
        if self.store is None:
            return
        raw = self.store.load_list(self.key, HISTORY_ENTRY_SCHEMA)
        self._entries = [HistoryEntry.from_dict(d) for d in raw][: self.capacity]

    def record(self, value: Any, from_unit: str, to_unit: str, *, timestamp_ms: Optional[int] = None) -> bool:
        """Prepend an entry; returns False when it repeats the latest one."""
        text = "" if value is None else str(value)
        entry = HistoryEntry(
            value=text if text != "" else "0",
            from_unit=from_unit,
            to_unit=to_unit,
            timestamp_ms=_now_ms() if timestamp_ms is None else int(timestamp_ms),
        )
        if self._entries and self._entries[0].same_action(entry):
            return False
        self._entries = [entry, *self._entries][: self.capacity]
        self._save()
        return True

    def clear(self) -> None:
        self._entries = []
        self._save()
        log.info("ConversionHistory: cleared")

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(self.key, [e.to_dict() for e in self._entries])
