# unit_manager/converter.py
from __future__ import annotations

from typing import Dict

from .units import MASS, UnitRegistry


def convert(value: float, from_key: str, to_key: str, registry: UnitRegistry = MASS) -> float:
    """
    Convert through the family's base unit: value * f(from) / f(to).

    Raises UnknownUnitError when either key is not registered.
    """
    u_from = registry.get(from_key)
    u_to = registry.get(to_key)
    if u_from is u_to:
        return float(value)
    in_base = float(value) * u_from.factor_to_base
    return in_base / u_to.factor_to_base


def convert_all(
    value: float,
    from_key: str,
    registry: UnitRegistry = MASS,
    *,
    include_source: bool = False,
) -> Dict[str, float]:
    """
    Convert one value into every unit of the family.

    The base value is derived once and divided by the whole factor vector,
    so each entry matches convert(value, from_key, key) exactly.
    """
    u_from = registry.get(from_key)
    in_base = float(value) * u_from.factor_to_base
    projected = (in_base / registry.factors).tolist()

    out: Dict[str, float] = {}
    for unit, v in zip(registry.units, projected):
        if unit is u_from:
            if include_source:
                out[unit.key] = float(value)
            continue
        out[unit.key] = v
    return out


def convert_mass(value: float, from_key: str, to_key: str) -> float:
    return convert(value, from_key, to_key, MASS)
