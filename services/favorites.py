# services/favorites.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from services.persistence import PreferenceStore
from services.schemas import FAVORITE_SCHEMA
from unit_manager.units import MASS, UnitRegistry

log = logging.getLogger(__name__)

FAVORITES_KEY = "mass:favorites"
FAVORITES_CAPACITY = 6
DEFAULT_FAVORITES = ("g", "kg", "t", "oz", "lb", "st")


class FavoritesList:
    """Ordered, deduplicated unit keys pinned to the top of the unit pickers."""

    def __init__(
        self,
        store: Optional[PreferenceStore] = None,
        *,
        registry: UnitRegistry = MASS,
        key: str = FAVORITES_KEY,
        capacity: int = FAVORITES_CAPACITY,
        default: Iterable[str] = DEFAULT_FAVORITES,
    ):
        self.store = store
        self.registry = registry
        self.key = key
        self.capacity = capacity
        self._default = list(default)
        self._keys: List[str] = self._clean(self._default)
        self.reload()

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.registry.canonical(key) in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def reload(self) -> None:
        if self.store is None:
            return
        raw = self.store.load(self.key, default=None)
        if raw is None:
            return
        if not isinstance(raw, list):
            self._keys = []
            return
        self._keys = self._clean(self.store.load_list(self.key, FAVORITE_SCHEMA))

    def toggle(self, key: str) -> bool:
        """
        Add or remove a unit. Returns True when the unit is a favorite
        afterwards; adding past capacity is rejected and returns False.
        """
        canon = self.registry.get(key).key
        if canon in self._keys:
            self._keys = [k for k in self._keys if k != canon]
            self._save()
            return False
        if len(self._keys) >= self.capacity:
            log.info("FavoritesList: full (%d), '%s' not added", self.capacity, canon)
            return False
        self._keys = [*self._keys, canon]
        self._save()
        return True

    def partition(self):
        """(favored units, other units) in registry order."""
        favored = [u for u in self.registry if u.key in self._keys]
        others = [u for u in self.registry if u.key not in self._keys]
        return favored, others

    def _clean(self, keys: Iterable[str]) -> List[str]:
        out: List[str] = []
        for k in keys:
            canon = self.registry.canonical(k)
            if canon and canon not in out:
                out.append(canon)
        return out[: self.capacity]

    def _save(self) -> None:
        if self.store is not None:
            self.store.save(self.key, list(self._keys))
