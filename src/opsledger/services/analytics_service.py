"""Financial analytics: period summary and per-day series."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger.calculators.summary import AnalyticsReport, build_report
from opsledger.errors import ValidationError
from opsledger.models import AttendanceRecord, ExpenseRecord, PayrollRecord, SalesRecord
from opsledger.services.queries import DateRange

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Aggregates sales, expenses, payroll and attendance.

    Notes:
    - payroll is selected by comparing the month marker (first of month) with
      the day bounds, so a range starting mid-month leaves that month out;
    - attendance counts describe today only, whatever the requested range.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.clock = clock

    async def summarize(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        today: date | None = None,
    ) -> AnalyticsReport:
        """Build the summary for an optional inclusive date range.

        Without both bounds every record is included.
        """
        period = DateRange(start=start_date, end=end_date)
        if period.is_bounded and period.start > period.end:
            raise ValidationError("start_date must not be after end_date")

        sales = (
            await self.session.execute(
                select(SalesRecord.date, SalesRecord.amount).where(
                    *period.timestamp_clauses(SalesRecord.date)
                )
            )
        ).all()
        expenses = (
            await self.session.execute(
                select(ExpenseRecord.date, ExpenseRecord.category, ExpenseRecord.amount).where(
                    *period.timestamp_clauses(ExpenseRecord.date)
                )
            )
        ).all()
        payroll_totals = (
            await self.session.execute(
                select(PayrollRecord.total_payable).where(
                    *period.marker_clauses(PayrollRecord.month)
                )
            )
        ).scalars().all()
        today_statuses = (
            await self.session.execute(
                select(AttendanceRecord.status).where(
                    AttendanceRecord.day == (today or self.clock().date())
                )
            )
        ).scalars().all()

        report = build_report(
            sales=[(row.date, row.amount) for row in sales],
            expenses=[(row.date, row.category, row.amount) for row in expenses],
            payroll_totals=payroll_totals,
            today_statuses=today_statuses,
        )
        logger.debug(
            "Analytics %s..%s: sales=%s expenses=%s payroll=%s profit=%s",
            start_date,
            end_date,
            report.summary.total_sales,
            report.summary.total_expenses,
            report.summary.total_payroll,
            report.summary.profit,
        )
        return report
