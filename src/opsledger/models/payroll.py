"""Payroll settings and monthly payroll record models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsledger.models.base import Base, Money, TimestampMixin

if TYPE_CHECKING:
    from opsledger.models.employee import Employee


class PayrollSettings(Base, TimestampMixin):
    """Organization-wide payroll defaults (single row)."""

    __tablename__ = "payroll_settings"

    settings_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    default_payroll_model: Mapped[str] = mapped_column(
        String, nullable=False, default="fixed_salary"
    )
    default_working_days: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    default_daily_rate: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("100")
    )

    __table_args__ = (
        CheckConstraint(
            "default_payroll_model IN ('fixed_salary', 'daily_rate')",
            name="payroll_settings_model_check",
        ),
    )


class PayrollRecord(Base, TimestampMixin):
    """Computed pay for one employee for one calendar month."""

    __tablename__ = "payroll_record"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Always the first day of the month
    month: Mapped[date] = mapped_column(Date, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Money, nullable=False)
    working_days: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    days_worked: Mapped[int] = mapped_column(Integer, nullable=False)
    service_charge: Mapped[Decimal] = mapped_column(
        Money, nullable=False, default=Decimal("0")
    )
    total_payable: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        UniqueConstraint("employee_id", "month", name="payroll_employee_month_unique"),
        CheckConstraint(
            "status IN ('pending', 'processed', 'paid')",
            name="payroll_status_check",
        ),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="payroll_records")
