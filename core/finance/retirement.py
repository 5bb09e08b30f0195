# core/finance/retirement.py
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from core.finance.recurring_deposit import yearly_rollup

ACCUMULATION_COLUMNS = ["period", "contribution", "interest", "balance"]
WITHDRAWAL_COLUMNS = ["period", "withdrawal", "interest", "balance"]


def fv(pv: float, rate_per: float, n: float) -> float:
    return pv * (1 + rate_per) ** n


def fva(pmt: float, rate_per: float, n: float, annuity_due: bool = False) -> float:
    """Future value of a level payment stream."""
    if rate_per == 0:
        return pmt * n
    factor = ((1 + rate_per) ** n - 1) / rate_per
    return pmt * (1 + rate_per) * factor if annuity_due else pmt * factor


def pv_annuity_factor(rate_per: float, n: int) -> float:
    if n <= 0:
        return 0.0
    if rate_per == 0:
        return float(n)
    return (1 - (1 + rate_per) ** (-n)) / rate_per


@dataclass
class RetirementInputs:
    current_age: int = 30
    retire_age: int = 60
    life_expectancy: int = 85
    current_savings: float = 0.0
    monthly_contribution: float = 0.0
    annual_return_pre_pct: float = 7.0
    annual_return_post_pct: float = 4.0
    inflation_pct: float = 3.0
    desired_monthly_income_today: float = 0.0

    @property
    def months_to_retire(self) -> int:
        return max(self.retire_age - self.current_age, 0) * 12

    @property
    def months_in_retirement(self) -> int:
        return max(self.life_expectancy - self.retire_age, 0) * 12

    @property
    def monthly_rate_pre(self) -> float:
        return (self.annual_return_pre_pct / 100) / 12

    @property
    def monthly_rate_post(self) -> float:
        return (self.annual_return_post_pct / 100) / 12

    @property
    def monthly_inflation(self) -> float:
        return (self.inflation_pct / 100) / 12


@dataclass(frozen=True)
class RetirementPlan:
    future_of_current: float
    future_of_contributions: float
    nest_egg: float
    income_at_retirement: float
    required_nest_egg: float
    surplus: float               # negative means shortfall

    @property
    def on_track(self) -> bool:
        return self.surplus >= 0


def plan_retirement(inputs: RetirementInputs) -> RetirementPlan:
    """
    Nest egg at retirement versus the capital needed to pay the desired
    income (inflated to the first retirement month) as level withdrawals.
    Contributions are made at the start of each month.
    """
    n_pre = inputs.months_to_retire
    fut_current = fv(inputs.current_savings, inputs.monthly_rate_pre, n_pre)
    fut_contrib = fva(inputs.monthly_contribution, inputs.monthly_rate_pre, n_pre, annuity_due=True)
    nest_egg = max(fut_current + fut_contrib, 0.0)

    income = 0.0
    if inputs.desired_monthly_income_today > 0:
        income = inputs.desired_monthly_income_today * (1 + inputs.monthly_inflation) ** n_pre

    required = income * pv_annuity_factor(inputs.monthly_rate_post, inputs.months_in_retirement)
    return RetirementPlan(
        future_of_current=fut_current,
        future_of_contributions=fut_contrib,
        nest_egg=nest_egg,
        income_at_retirement=income,
        required_nest_egg=required,
        surplus=nest_egg - required,
    )


def accumulation_schedule(inputs: RetirementInputs) -> pd.DataFrame:
    n = inputs.months_to_retire
    if n <= 0 or (inputs.current_savings <= 0 and inputs.monthly_contribution <= 0):
        return pd.DataFrame(columns=ACCUMULATION_COLUMNS)
    r = inputs.monthly_rate_pre
    bal = inputs.current_savings
    rows = []
    for m in range(1, n + 1):
        if inputs.monthly_contribution > 0:
            bal += inputs.monthly_contribution
        before = bal
        if r > 0:
            bal *= 1 + r
        rows.append({
            "period": m,
            "contribution": inputs.monthly_contribution,
            "interest": max(bal - before, 0.0),
            "balance": bal,
        })
    return pd.DataFrame(rows, columns=ACCUMULATION_COLUMNS)


def withdrawal_schedule(inputs: RetirementInputs, plan: RetirementPlan) -> pd.DataFrame:
    """Grow for the month, then withdraw; stops once the balance is gone."""
    n = inputs.months_in_retirement
    if n <= 0 or plan.nest_egg <= 0 or plan.income_at_retirement <= 0:
        return pd.DataFrame(columns=WITHDRAWAL_COLUMNS)
    r = inputs.monthly_rate_post
    bal = plan.nest_egg
    rows = []
    for m in range(1, n + 1):
        interest = 0.0
        if r > 0:
            before = bal
            bal *= 1 + r
            interest = bal - before
        w = min(bal, plan.income_at_retirement)
        bal = max(bal - w, 0.0)
        rows.append({"period": m, "withdrawal": w, "interest": max(interest, 0.0), "balance": bal})
        if bal <= 0:
            break
    return pd.DataFrame(rows, columns=WITHDRAWAL_COLUMNS)


def accumulation_yearly(monthly: pd.DataFrame) -> pd.DataFrame:
    return yearly_rollup(monthly, flow_columns=("contribution", "interest"))


def withdrawal_yearly(monthly: pd.DataFrame) -> pd.DataFrame:
    return yearly_rollup(monthly, flow_columns=("withdrawal", "interest"))
