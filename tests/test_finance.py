# tests/test_finance.py

import pandas as pd
import pytest

from core.finance import Compounding, RetirementInputs, plan_retirement, purchasing_power
from core.finance.recurring_deposit import SCHEDULE_COLUMNS, rd_closed_form, rd_schedule, rd_summary, yearly_rollup
from core.finance.retirement import (
    accumulation_schedule,
    accumulation_yearly,
    fv,
    fva,
    pv_annuity_factor,
    withdrawal_schedule,
)


# ---------------- inflation ----------------

def test_purchasing_power():
    res = purchasing_power(1000, 10, 1)
    assert res.future_value == pytest.approx(909.0909, rel=1e-6)
    assert res.value_lost == pytest.approx(90.9091, rel=1e-5)


def test_purchasing_power_zero_rate_keeps_value():
    res = purchasing_power(1000, 0, 5)
    assert res.future_value == 1000 and res.value_lost == 0


@pytest.mark.parametrize("amount,rate,years", [(0, 3, 10), (-5, 3, 10), (100, -1, 10), (100, 3, -1)])
def test_purchasing_power_invalid_inputs_give_zero(amount, rate, years):
    res = purchasing_power(amount, rate, years)
    assert res.future_value == 0 and res.value_lost == 0


# ---------------- recurring deposit ----------------

def test_rd_quarterly_credits_every_third_month():
    df = rd_schedule(1000, 12, 1, compounding=Compounding.QUARTERLY)
    assert list(df.columns) == SCHEDULE_COLUMNS
    assert len(df) == 12
    credited = df.loc[df["interest"] > 0, "period"].tolist()
    assert credited == [3, 6, 9, 12]
    assert df["interest"].iloc[2] == pytest.approx(90.0)
    assert df["balance"].iloc[-1] == pytest.approx(12927.40743, rel=1e-9)


def test_rd_yearly_and_zero_rate():
    yearly = rd_schedule(1000, 12, 1, compounding="yearly")
    assert yearly["balance"].iloc[-1] == pytest.approx(13440.0)
    flat = rd_schedule(1000, 0, 2, compounding=Compounding.MONTHLY)
    assert flat["interest"].sum() == 0
    assert flat["balance"].iloc[-1] == pytest.approx(24000.0)


def test_rd_summary():
    s = rd_summary(rd_schedule(1000, 12, 1))
    assert s.deposits_total == pytest.approx(12000)
    assert s.maturity == pytest.approx(12927.40743)
    assert s.total_interest == pytest.approx(927.40743)
    assert s.interest_pct == pytest.approx(927.40743 / 120)


def test_rd_invalid_inputs_give_empty_schedule():
    assert rd_schedule(0, 7, 1).empty
    assert rd_schedule(1000, 7, 0, 0).empty
    assert rd_summary(pd.DataFrame(columns=SCHEDULE_COLUMNS)).maturity == 0


def test_rd_closed_form_tracks_simulation():
    assert rd_closed_form(1000, 0, 1) == pytest.approx(12000)
    simulated = rd_summary(rd_schedule(1000, 12, 1)).maturity
    assert rd_closed_form(1000, 12, 1) == pytest.approx(simulated, rel=0.02)


def test_yearly_rollup_sums_flows_and_keeps_closing_balance():
    monthly = rd_schedule(1000, 12, 1, 6)
    yearly = yearly_rollup(monthly)
    assert yearly["period"].tolist() == [1, 2]
    assert yearly["deposit"].tolist() == [12000, 6000]
    assert yearly["balance"].iloc[-1] == monthly["balance"].iloc[-1]
    assert yearly["interest"].sum() == pytest.approx(monthly["interest"].sum())


# ---------------- retirement ----------------

def test_time_value_helpers():
    assert fv(100, 0.01, 2) == pytest.approx(102.01)
    assert fva(100, 0, 12) == 1200
    assert fva(100, 0.01, 2) == pytest.approx(201.0)
    assert fva(100, 0.01, 2, annuity_due=True) == pytest.approx(203.01)
    assert pv_annuity_factor(0, 5) == 5
    assert pv_annuity_factor(0.01, 0) == 0


def test_plan_exactly_funded():
    inputs = RetirementInputs(
        current_age=60, retire_age=60, life_expectancy=61,
        current_savings=12000, annual_return_post_pct=0, desired_monthly_income_today=1000,
    )
    plan = plan_retirement(inputs)
    assert plan.nest_egg == pytest.approx(12000)
    assert plan.required_nest_egg == pytest.approx(12000)
    assert plan.on_track

    wd = withdrawal_schedule(inputs, plan)
    assert len(wd) == 12
    assert wd["balance"].iloc[-1] == pytest.approx(0, abs=1e-9)


def test_plan_shortfall_and_inflated_income():
    inputs = RetirementInputs(current_age=30, retire_age=31, life_expectancy=60,
                              monthly_contribution=100, annual_return_pre_pct=0,
                              inflation_pct=12, desired_monthly_income_today=1000)
    plan = plan_retirement(inputs)
    assert plan.nest_egg == pytest.approx(1200)
    assert plan.income_at_retirement == pytest.approx(1000 * 1.01 ** 12)
    assert not plan.on_track
    assert plan.surplus < 0


def test_accumulation_matches_closed_form():
    inputs = RetirementInputs(current_age=40, retire_age=45, current_savings=5000,
                              monthly_contribution=250, annual_return_pre_pct=6)
    acc = accumulation_schedule(inputs)
    assert len(acc) == 60
    assert acc["balance"].iloc[-1] == pytest.approx(plan_retirement(inputs).nest_egg, rel=1e-9)
    assert len(accumulation_yearly(acc)) == 5


def test_withdrawal_stops_when_depleted():
    inputs = RetirementInputs(current_age=60, retire_age=60, life_expectancy=90,
                              current_savings=5000, annual_return_post_pct=0,
                              desired_monthly_income_today=1000)
    plan = plan_retirement(inputs)
    wd = withdrawal_schedule(inputs, plan)
    assert len(wd) == 5
    assert wd["withdrawal"].sum() == pytest.approx(5000)
