"""Sales, expense, savings and profit allocation models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from opsledger.models.base import Base, Money, TimestampMixin


# ===== Leaf records =====


class SalesRecord(Base, TimestampMixin):
    """A sale recorded by an employee."""

    __tablename__ = "sales_record"

    sale_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    client_name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class ExpenseRecord(Base, TimestampMixin):
    """An expense recorded by an employee."""

    __tablename__ = "expense_record"

    expense_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


# ===== Monthly snapshots =====


class CompanySavings(Base, TimestampMixin):
    """Reserved funds for one month, as a percentage of revenue or profit."""

    __tablename__ = "company_savings"

    savings_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    month: Mapped[date] = mapped_column(Date, nullable=False, unique=True)
    total_revenue: Mapped[Decimal] = mapped_column(Money, nullable=False)
    savings_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    savings_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class ProfitAllocation(Base, TimestampMixin):
    """How one month's profit is split across savings and categories."""

    __tablename__ = "profit_allocation"

    allocation_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    month: Mapped[date] = mapped_column(Date, nullable=False, unique=True)
    total_profit: Mapped[Decimal] = mapped_column(Money, nullable=False)
    savings_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    savings_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    # [{"category": str, "amount": str, "description": str | None}, ...]
    allocations: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    remaining_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
