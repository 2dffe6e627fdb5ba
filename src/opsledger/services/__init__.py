"""Domain services. Each takes an ``AsyncSession`` and leaves commit to the caller."""

from opsledger.services.analytics_service import AnalyticsService
from opsledger.services.attendance_service import AttendanceAction, AttendanceService
from opsledger.services.payroll_service import PayrollService
from opsledger.services.queries import (
    AttendanceQuery,
    DateRange,
    ExpenseQuery,
    PayrollQuery,
    SalesQuery,
)
from opsledger.services.records_service import RecordsService
from opsledger.services.savings_service import SavingsService
from opsledger.services.settings_service import PayrollSettingsService
from opsledger.services.state_machine import PayrollStatus, PayrollStatusMachine

__all__ = [
    "AnalyticsService",
    "AttendanceAction",
    "AttendanceQuery",
    "AttendanceService",
    "DateRange",
    "ExpenseQuery",
    "PayrollQuery",
    "PayrollService",
    "PayrollSettingsService",
    "PayrollStatus",
    "PayrollStatusMachine",
    "RecordsService",
    "SalesQuery",
    "SavingsService",
]
