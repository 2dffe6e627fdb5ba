"""Pure reductions behind the analytics summary.

The service layer fetches rows; everything here works on plain values so the
arithmetic can be checked without a database.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from opsledger.models.attendance import AttendanceStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class DayAmount:
    day: str  # ISO date, YYYY-MM-DD
    amount: Decimal


@dataclass(frozen=True)
class CategoryAmount:
    category: str
    amount: Decimal


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Attendance counts for a single day.

    ``present_count`` includes late arrivals.
    """

    present_count: int = 0
    late_count: int = 0
    absent_count: int = 0


@dataclass(frozen=True)
class FinancialSummary:
    total_sales: Decimal
    total_expenses: Decimal
    total_payroll: Decimal
    profit: Decimal
    profit_margin: str
    present_count: int
    absent_count: int
    late_count: int


@dataclass(frozen=True)
class AnalyticsReport:
    summary: FinancialSummary
    sales_by_day: list[DayAmount] = field(default_factory=list)
    expenses_by_category: list[CategoryAmount] = field(default_factory=list)
    expenses_by_day: list[DayAmount] = field(default_factory=list)


def day_key(value: datetime) -> str:
    """Calendar-day key used for the per-day series."""
    return value.date().isoformat()


def total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def group_by_day(entries: Iterable[tuple[datetime, Decimal]]) -> list[DayAmount]:
    """Sum amounts per calendar day, ascending by day."""
    buckets: dict[str, Decimal] = {}
    for when, amount in entries:
        key = day_key(when)
        buckets[key] = buckets.get(key, ZERO) + amount
    return [DayAmount(day=day, amount=amount) for day, amount in sorted(buckets.items())]


def group_by_category(entries: Iterable[tuple[str, Decimal]]) -> list[CategoryAmount]:
    """Sum amounts per category, in first-seen order."""
    buckets: dict[str, Decimal] = {}
    for category, amount in entries:
        buckets[category] = buckets.get(category, ZERO) + amount
    return [CategoryAmount(category=c, amount=a) for c, a in buckets.items()]


def profit_margin(profit: Decimal, total_sales: Decimal) -> str:
    """Profit as a percentage of sales, two decimals; "0" without sales."""
    if total_sales <= 0:
        return "0"
    margin = (profit / total_sales * Decimal("100")).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )
    return str(margin)


def attendance_snapshot(statuses: Iterable[str]) -> AttendanceSnapshot:
    """Count one day's attendance statuses."""
    present = late = absent = 0
    for status in statuses:
        if status == AttendanceStatus.LATE.value:
            late += 1
            present += 1
        elif status == AttendanceStatus.PRESENT.value:
            present += 1
        elif status == AttendanceStatus.ABSENT.value:
            absent += 1
    return AttendanceSnapshot(present_count=present, late_count=late, absent_count=absent)


def build_report(
    sales: list[tuple[datetime, Decimal]],
    expenses: list[tuple[datetime, str, Decimal]],
    payroll_totals: Iterable[Decimal],
    today_statuses: Iterable[str],
) -> AnalyticsReport:
    """Assemble the summary and series from fetched rows.

    profit = sales - expenses - payroll
    """
    total_sales = total(amount for _, amount in sales)
    total_expenses = total(amount for _, _, amount in expenses)
    total_payroll = total(payroll_totals)
    profit = total_sales - total_expenses - total_payroll
    snapshot = attendance_snapshot(today_statuses)

    return AnalyticsReport(
        summary=FinancialSummary(
            total_sales=total_sales,
            total_expenses=total_expenses,
            total_payroll=total_payroll,
            profit=profit,
            profit_margin=profit_margin(profit, total_sales),
            present_count=snapshot.present_count,
            absent_count=snapshot.absent_count,
            late_count=snapshot.late_count,
        ),
        sales_by_day=group_by_day(sales),
        expenses_by_category=group_by_category(
            (category, amount) for _, category, amount in expenses
        ),
        expenses_by_day=group_by_day((when, amount) for when, _, amount in expenses),
    )
