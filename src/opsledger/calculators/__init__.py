"""Pure calculations: pay, period boundaries, summaries, allocations."""

from opsledger.calculators.allocation import (
    AllocationLine,
    compute_remaining_amount,
    compute_savings_amount,
)
from opsledger.calculators.pay_calculator import PayComputation, compute_pay
from opsledger.calculators.periods import month_start, next_month_start
from opsledger.calculators.summary import AnalyticsReport, build_report

__all__ = [
    "AllocationLine",
    "AnalyticsReport",
    "PayComputation",
    "build_report",
    "compute_pay",
    "month_start",
    "next_month_start",
    "compute_remaining_amount",
    "compute_savings_amount",
]
