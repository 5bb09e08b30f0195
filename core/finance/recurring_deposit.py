# core/finance/recurring_deposit.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import pandas as pd

SCHEDULE_COLUMNS = ["period", "deposit", "interest", "balance"]


class Compounding(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def per_year(self) -> int:
        return {"monthly": 12, "quarterly": 4, "yearly": 1}[self.value]

    @property
    def every_months(self) -> int:
        return 12 // self.per_year


@dataclass(frozen=True)
class RDSummary:
    deposits_total: float
    maturity: float
    total_interest: float
    interest_pct: float


def total_months(years: int, months: int) -> int:
    return max(int(years), 0) * 12 + max(int(months), 0)


def rd_schedule(
    monthly_deposit: float,
    annual_rate_pct: float,
    years: int,
    months: int = 0,
    compounding: Compounding = Compounding.QUARTERLY,
) -> pd.DataFrame:
    """
    Month-by-month simulation: the deposit lands at each month end and
    interest is credited only on compounding boundaries.
    """
    compounding = Compounding(compounding)
    n = total_months(years, months)
    if monthly_deposit <= 0 or n <= 0 or annual_rate_pct < 0:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)

    period_rate = (annual_rate_pct / 100) / compounding.per_year
    step = compounding.every_months

    rows = []
    balance = 0.0
    for m in range(1, n + 1):
        balance += monthly_deposit
        interest = 0.0
        if period_rate and m % step == 0:
            after = balance * (1 + period_rate)
            interest = after - balance
            balance = after
        rows.append({"period": m, "deposit": monthly_deposit, "interest": max(interest, 0.0), "balance": balance})
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def yearly_rollup(monthly: pd.DataFrame, flow_columns=("deposit", "interest")) -> pd.DataFrame:
    """Sum flows per 12-month block and keep the closing balance."""
    if monthly.empty:
        return pd.DataFrame(columns=["period", *flow_columns, "balance"])
    year = (monthly["period"] - 1) // 12 + 1
    agg = {c: "sum" for c in flow_columns}
    agg["balance"] = "last"
    out = monthly.groupby(year, sort=True).agg(agg).reset_index(names="period")
    return out[["period", *flow_columns, "balance"]]


def rd_summary(schedule: pd.DataFrame) -> RDSummary:
    if schedule.empty:
        return RDSummary(0.0, 0.0, 0.0, 0.0)
    deposits = float(schedule["deposit"].sum())
    maturity = float(schedule["balance"].iloc[-1])
    interest = max(maturity - deposits, 0.0)
    pct = (interest / deposits) * 100 if deposits > 0 else 0.0
    return RDSummary(deposits, maturity, interest, pct)


def rd_closed_form(
    monthly_deposit: float,
    annual_rate_pct: float,
    years: int,
    months: int = 0,
    compounding: Compounding = Compounding.QUARTERLY,
) -> float:
    """
    Engineering approximation of the same maturity:
        P * ((1 + i)^k - 1) / (1 - (1 + i)^(-c/12))
    with i = r / c and k = (months / 12) * c.
    """
    compounding = Compounding(compounding)
    p = max(monthly_deposit, 0.0)
    n = total_months(years, months)
    c = compounding.per_year
    i = (annual_rate_pct / 100) / c
    if i == 0:
        return p * n
    denom = 1 - (1 + i) ** (-(c / 12))
    numerator = (1 + i) ** ((n / 12) * c) - 1
    return p * (numerator / denom) if denom != 0 else 0.0
