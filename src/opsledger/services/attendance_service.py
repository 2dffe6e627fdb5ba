"""Attendance ledger: daily check-in / check-out / absence per employee."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from opsledger.auth import Principal
from opsledger.database import dialect_insert
from opsledger.errors import NotFoundError, ValidationError
from opsledger.models import AttendanceRecord, AttendanceStatus, Employee
from opsledger.services.queries import AttendanceQuery

logger = logging.getLogger(__name__)


class AttendanceAction(str, Enum):
    """Actions accepted by ``record_action``."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    MARK_ABSENT = "mark-absent"


def worked_hours(check_in: datetime, check_out: datetime) -> float:
    """Hours between check-in and check-out, rounded half-up to 2 decimals."""
    seconds = (check_out - check_in).total_seconds()
    hours = Decimal(str(seconds)) / Decimal("3600")
    rounded = hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return max(float(rounded), 0.0)


class AttendanceService:
    """Records and queries daily attendance.

    State per record:
    - absent → present (check-in)
    - present|late → checked out (check-out; derived, not a stored status)
    - any → absent (mark-absent clears both timestamps and hours)
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.clock = clock

    async def record_action(
        self,
        principal: Principal,
        action: str | None,
        employee_id: UUID | None = None,
        day: date | None = None,
        at: datetime | None = None,
    ) -> AttendanceRecord:
        """Apply an attendance action to the (employee, day) record.

        Workers always act on themselves; admins may act on any employee.
        ``at`` is the instant of the action and defaults to now.
        """
        if not action:
            raise ValidationError("Missing required fields: action")
        try:
            parsed = AttendanceAction(action)
        except ValueError:
            raise ValidationError(f"Unknown attendance action '{action}'") from None

        target_id = principal.target_employee(employee_id)
        if await self.session.get(Employee, target_id) is None:
            raise NotFoundError("Employee", target_id)

        now = at or self.clock()
        record = await self._get_or_create(target_id, day or now.date())

        if parsed == AttendanceAction.CHECK_IN:
            record.check_in_time = now
            record.status = AttendanceStatus.PRESENT.value
        elif parsed == AttendanceAction.CHECK_OUT:
            record.check_out_time = now
            if record.check_in_time is not None:
                record.working_hours = worked_hours(record.check_in_time, now)
        else:
            record.status = AttendanceStatus.ABSENT.value
            record.check_in_time = None
            record.check_out_time = None
            record.working_hours = 0.0

        await self.session.flush()
        logger.info(
            "Attendance %s for employee %s on %s (status=%s, hours=%s)",
            parsed.value,
            target_id,
            record.day,
            record.status,
            record.working_hours,
        )
        return record

    async def list_records(
        self,
        principal: Principal,
        query: AttendanceQuery | None = None,
    ) -> list[AttendanceRecord]:
        """List attendance records, newest day first.

        Workers only ever see their own records.
        """
        query = query or AttendanceQuery()
        query = replace(query, employee_id=principal.scope_employee(query.employee_id))

        result = await self.session.execute(
            select(AttendanceRecord)
            .where(*query.clauses())
            .options(selectinload(AttendanceRecord.employee))
            .order_by(AttendanceRecord.day.desc())
        )
        return list(result.scalars().all())

    async def _get_or_create(self, employee_id: UUID, day: date) -> AttendanceRecord:
        """Locate the (employee, day) record, creating an absent one if missing.

        The insert is ON CONFLICT DO NOTHING, so concurrent first actions on
        the same day converge on a single row.
        """
        insert = dialect_insert(self.session)
        await self.session.execute(
            insert(AttendanceRecord)
            .values(
                employee_id=employee_id,
                day=day,
                status=AttendanceStatus.ABSENT.value,
                working_hours=0.0,
            )
            .on_conflict_do_nothing(index_elements=["employee_id", "day"])
        )
        result = await self.session.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.day == day,
            )
        )
        return result.scalar_one()
