"""Employee directory model.

Rows are written by the external admin tooling; the core only reads them.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsledger.models.base import Base, Money, TimestampMixin

if TYPE_CHECKING:
    from opsledger.models.attendance import AttendanceRecord
    from opsledger.models.payroll import PayrollRecord


class CompensationModel(str, Enum):
    """How an employee's monthly pay is derived."""

    FIXED_SALARY = "fixed_salary"
    DAILY_RATE = "daily_rate"


class EmployeeStatus(str, Enum):
    """Directory status values."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Employee(Base, TimestampMixin):
    """Employee record."""

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="worker")
    # None falls back to PayrollSettings.default_payroll_model
    compensation_model: Mapped[str | None] = mapped_column(String, nullable=True)
    fixed_salary: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    daily_rate: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=EmployeeStatus.ACTIVE.value
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'worker')", name="employee_role_check"),
        CheckConstraint(
            "compensation_model IS NULL OR compensation_model IN ('fixed_salary', 'daily_rate')",
            name="employee_compensation_model_check",
        ),
        CheckConstraint(
            "status IN ('active', 'inactive')",
            name="employee_status_check",
        ),
    )

    # Relationships
    attendance_records: Mapped[list[AttendanceRecord]] = relationship(
        back_populates="employee"
    )
    payroll_records: Mapped[list[PayrollRecord]] = relationship(back_populates="employee")
