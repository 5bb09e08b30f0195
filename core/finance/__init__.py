# core/finance/__init__.py

from .inflation import InflationResult, purchasing_power
from .recurring_deposit import Compounding, RDSummary, rd_closed_form, rd_schedule, rd_summary, yearly_rollup
from .retirement import RetirementInputs, RetirementPlan, plan_retirement

__all__ = [
    "InflationResult",
    "purchasing_power",
    "Compounding",
    "RDSummary",
    "rd_closed_form",
    "rd_schedule",
    "rd_summary",
    "yearly_rollup",
    "RetirementInputs",
    "RetirementPlan",
    "plan_retirement",
]
