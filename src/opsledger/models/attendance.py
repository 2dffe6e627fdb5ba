"""Daily attendance model."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from opsledger.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from opsledger.models.employee import Employee


class AttendanceStatus(str, Enum):
    """Attendance status values. ``late`` is only ever set externally."""

    ABSENT = "absent"
    PRESENT = "present"
    LATE = "late"


class AttendanceRecord(Base, TimestampMixin):
    """One employee's presence on one calendar day."""

    __tablename__ = "attendance_record"

    attendance_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)
    check_in_time: Mapped[datetime | None] = mapped_column(nullable=True)
    check_out_time: Mapped[datetime | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=AttendanceStatus.ABSENT.value
    )
    working_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        UniqueConstraint("employee_id", "day", name="attendance_employee_day_unique"),
        CheckConstraint(
            "status IN ('absent', 'present', 'late')",
            name="attendance_status_check",
        ),
        CheckConstraint("working_hours >= 0", name="attendance_hours_non_negative"),
    )

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="attendance_records")

    @property
    def is_checked_out(self) -> bool:
        """Check if the day is complete (both check-in and check-out recorded)."""
        return self.check_in_time is not None and self.check_out_time is not None
