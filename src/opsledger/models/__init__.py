"""ORM models."""

from opsledger.models.attendance import AttendanceRecord, AttendanceStatus
from opsledger.models.base import Base, TimestampMixin
from opsledger.models.employee import CompensationModel, Employee, EmployeeStatus
from opsledger.models.finance import CompanySavings, ExpenseRecord, ProfitAllocation, SalesRecord
from opsledger.models.payroll import PayrollRecord, PayrollSettings

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "Base",
    "CompanySavings",
    "CompensationModel",
    "Employee",
    "EmployeeStatus",
    "ExpenseRecord",
    "PayrollRecord",
    "PayrollSettings",
    "ProfitAllocation",
    "SalesRecord",
    "TimestampMixin",
]
