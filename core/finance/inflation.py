# core/finance/inflation.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InflationResult:
    future_value: float = 0.0   # today's amount in purchasing power after `years`
    value_lost: float = 0.0


def purchasing_power(amount: float, inflation_rate_pct: float, years: float) -> InflationResult:
    """
    Real value of ``amount`` after ``years`` of constant inflation:
    amount / (1 + rate)^years. Non-positive amounts and negative rates or
    horizons give an all-zero result.
    """
    if amount <= 0 or inflation_rate_pct < 0 or years < 0:
        return InflationResult()
    future = amount / (1 + inflation_rate_pct / 100) ** years
    return InflationResult(future_value=future, value_lost=amount - future)
