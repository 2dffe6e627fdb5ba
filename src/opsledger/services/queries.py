"""Typed filters turned into SQLAlchemy WHERE clauses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from opsledger.calculators.periods import day_bounds, month_start, next_month_start
from opsledger.models import AttendanceRecord, ExpenseRecord, PayrollRecord, SalesRecord


@dataclass(frozen=True)
class DateRange:
    """Optional inclusive date range.

    The range only applies when both bounds are given; the upper bound runs
    through the last instant of ``end``.
    """

    start: date | None = None
    end: date | None = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    def timestamp_clauses(self, column: Any) -> list[Any]:
        """Clauses restricting a datetime column to the range."""
        if not self.is_bounded:
            return []
        lower, _ = day_bounds(self.start)
        _, upper = day_bounds(self.end)
        return [column >= lower, column <= upper]

    def marker_clauses(self, column: Any) -> list[Any]:
        """Clauses comparing a date marker column directly to the bounds."""
        if not self.is_bounded:
            return []
        return [column >= self.start, column <= self.end]


@dataclass(frozen=True)
class AttendanceQuery:
    day: date | None = None
    employee_id: UUID | None = None

    def clauses(self) -> list[Any]:
        clauses: list[Any] = []
        if self.day is not None:
            clauses.append(AttendanceRecord.day == self.day)
        if self.employee_id is not None:
            clauses.append(AttendanceRecord.employee_id == self.employee_id)
        return clauses


@dataclass(frozen=True)
class PayrollQuery:
    month: date | None = None
    status: str | None = None
    employee_id: UUID | None = None

    def clauses(self) -> list[Any]:
        clauses: list[Any] = []
        if self.month is not None:
            clauses.append(PayrollRecord.month >= month_start(self.month))
            clauses.append(PayrollRecord.month < next_month_start(self.month))
        if self.status is not None:
            clauses.append(PayrollRecord.status == self.status)
        if self.employee_id is not None:
            clauses.append(PayrollRecord.employee_id == self.employee_id)
        return clauses


@dataclass(frozen=True)
class SalesQuery:
    period: DateRange = field(default_factory=DateRange)
    employee_id: UUID | None = None

    def clauses(self) -> list[Any]:
        clauses = self.period.timestamp_clauses(SalesRecord.date)
        if self.employee_id is not None:
            clauses.append(SalesRecord.employee_id == self.employee_id)
        return clauses


@dataclass(frozen=True)
class ExpenseQuery:
    period: DateRange = field(default_factory=DateRange)
    category: str | None = None

    def clauses(self) -> list[Any]:
        clauses = self.period.timestamp_clauses(ExpenseRecord.date)
        if self.category is not None:
            clauses.append(ExpenseRecord.category == self.category)
        return clauses
