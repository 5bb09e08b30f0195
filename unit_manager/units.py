# unit_manager/units.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple

import numpy as np


class UnknownUnitError(ValueError):
    """Raised when a unit key does not resolve inside a unit family."""


@dataclass(frozen=True)
class Unit:
    key: str
    display_name: str
    factor_to_base: float
    aliases: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.factor_to_base > 0:
            raise ValueError(f"Unit '{self.key}' needs a positive factor, got {self.factor_to_base!r}")


class UnitRegistry:
    """
    One unit family bridged through a single base unit.

    Lookups are case-insensitive and accept aliases, but every unit keeps the
    spelling of its canonical key. The table is built once and never mutated.
    """

    def __init__(self, units: Iterable[Unit], *, base_key: str, name: str = ""):
        self.name = name
        self._units: Tuple[Unit, ...] = tuple(units)
        self._lookup: Dict[str, Unit] = {}
        for u in self._units:
            for key in (u.key, *u.aliases):
                k = key.casefold()
                if k in self._lookup:
                    raise ValueError(f"Duplicate unit key: {key}")
                self._lookup[k] = u
        if base_key.casefold() not in self._lookup:
            raise ValueError(f"Base unit '{base_key}' not present.")
        self.base: Unit = self._lookup[base_key.casefold()]

        # grid conversions divide by this vector in one pass
        self._factors = np.array([u.factor_to_base for u in self._units], dtype=np.float64)
        self._factors.setflags(write=False)

    # ---- lookups ----
    def get(self, key: str) -> Unit:
        try:
            return self._lookup[str(key).casefold()]
        except KeyError as e:
            raise UnknownUnitError(
                f"Unknown unit '{key}'. Options: {[u.key for u in self._units]}"
            ) from e

    def canonical(self, key: Optional[str]) -> Optional[str]:
        if key is None:
            return None
        u = self._lookup.get(str(key).strip().casefold())
        return u.key if u else None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._lookup

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    @property
    def units(self) -> Tuple[Unit, ...]:
        return self._units

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(u.key for u in self._units)

    @property
    def factors(self) -> np.ndarray:
        return self._factors

    def display_name(self, key: str) -> str:
        return self.get(key).display_name


# Mass (base: kg). Avoirdupois factors are exact through the pound.
MASS = UnitRegistry(
    units=(
        # SI / metric
        Unit("µg", "Microgram (µg)", 1e-9, aliases=("ug", "mcg", "microgram")),
        Unit("mg", "Milligram (mg)", 1e-6, aliases=("milligram",)),
        Unit("g", "Gram (g)", 1e-3, aliases=("gram", "grams")),
        Unit("kg", "Kilogram (kg)", 1.0, aliases=("kilogram", "kilograms", "kilo")),
        Unit("t", "Metric ton / Tonne (t)", 1e3, aliases=("tonne", "tonnes")),
        # jewelry / small masses
        Unit("ct", "Carat (ct)", 0.0002, aliases=("carat",)),
        Unit("gr", "Grain (gr)", 0.00006479891, aliases=("grain",)),
        # avoirdupois
        Unit("oz", "Ounce (oz)", 0.028349523125, aliases=("ounce", "ounces")),
        Unit("lb", "Pound (lb)", 0.45359237, aliases=("lbs", "pound", "pounds")),
        Unit("st", "Stone (st)", 6.35029318, aliases=("stone",)),
        Unit("USTon", "US short ton (ton)", 907.18474, aliases=("short_ton",)),
        Unit("LTTon", "UK long ton (ton)", 1016.0469088, aliases=("long_ton",)),
        # engineering
        Unit("slug", "Slug (slug)", 14.59390294),
    ),
    base_key="kg",
    name="mass",
)
