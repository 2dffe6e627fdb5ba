"""Payroll engine - monthly pay records for each employee."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from opsledger.auth import Principal
from opsledger.calculators.pay_calculator import (
    SINGLE_RUN_WORKING_DAYS,
    ZERO,
    PayComputation,
    compute_pay,
    resolve_compensation_model,
)
from opsledger.calculators.periods import month_start, next_month_start
from opsledger.database import dialect_insert
from opsledger.errors import ConflictError, NotFoundError, ValidationError
from opsledger.models import (
    AttendanceRecord,
    AttendanceStatus,
    CompensationModel,
    Employee,
    EmployeeStatus,
    PayrollRecord,
    PayrollSettings,
)
from opsledger.services.queries import PayrollQuery
from opsledger.services.settings_service import PayrollSettingsService
from opsledger.services.state_machine import PayrollStatus, PayrollStatusMachine

logger = logging.getLogger(__name__)


class PayrollService:
    """Service for computing and managing payroll records.

    Operations:
    - process_single: one employee, caller-supplied days worked and service charge
    - process_bulk: every active employee, days worked derived from attendance
    - update_status: free movement between pending / processed / paid
    - delete: hard delete

    At most one record exists per (employee, month). The unique constraint is
    the arbiter; inserts go through ON CONFLICT DO NOTHING so a lost race is
    observed rather than overwriting.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.clock = clock
        self.settings_service = PayrollSettingsService(session)

    async def get_record(self, payroll_id: UUID) -> PayrollRecord:
        """Load a payroll record, raising NotFoundError if absent."""
        record = await self.session.get(PayrollRecord, payroll_id)
        if record is None:
            raise NotFoundError("Payroll record", payroll_id)
        return record

    async def list_records(
        self,
        principal: Principal,
        query: PayrollQuery | None = None,
    ) -> list[PayrollRecord]:
        """List payroll records, newest month first. Workers see their own only."""
        query = query or PayrollQuery()
        query = replace(query, employee_id=principal.scope_employee(query.employee_id))
        if query.status is not None:
            PayrollStatusMachine.parse(query.status)

        result = await self.session.execute(
            select(PayrollRecord)
            .where(*query.clauses())
            .options(selectinload(PayrollRecord.employee))
            .order_by(PayrollRecord.month.desc())
        )
        return list(result.scalars().all())

    async def process_single(
        self,
        employee_id: UUID,
        days_worked: int | None,
        service_charge: Decimal | None = None,
        month: date | datetime | None = None,
    ) -> PayrollRecord:
        """Create the payroll record for one employee for one month.

        Raises:
            ValidationError: days_worked missing or an input is negative
            NotFoundError: unknown employee
            ConflictError: a record already exists for (employee, month)
        """
        if days_worked is None:
            raise ValidationError("Missing required fields: days_worked")
        if days_worked < 0:
            raise ValidationError("days_worked must be non-negative")
        charge = service_charge if service_charge is not None else ZERO
        if charge < 0:
            raise ValidationError("service_charge must be non-negative")

        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)

        period = month_start(month or self.clock())
        if await self._exists(employee_id, period):
            raise ConflictError(
                f"Payroll already processed for employee {employee_id} in {period:%Y-%m}"
            )

        settings = await self.settings_service.get_default_settings()
        # An employee without a model is paid as fixed salary here; bulk runs
        # fall back to the organization default instead.
        pay = self._compute(
            employee,
            settings,
            days_worked,
            charge,
            fallback_model=CompensationModel.FIXED_SALARY.value,
        )

        stmt = self._insert_statement(
            employee_id=employee_id,
            month=period,
            pay=pay,
            working_days=SINGLE_RUN_WORKING_DAYS,
            days_worked=days_worked,
        )
        record = (await self.session.scalars(stmt.returning(PayrollRecord))).one_or_none()
        if record is None:
            # Another writer created the row between our check and insert
            raise ConflictError(
                f"Payroll already processed for employee {employee_id} in {period:%Y-%m}"
            )

        logger.info(
            "Processed payroll for employee %s in %s: total_payable=%s",
            employee_id,
            f"{period:%Y-%m}",
            record.total_payable,
        )
        return record

    async def process_bulk(self, reference_date: date | datetime | None = None) -> int:
        """Create payroll records for every active employee lacking one this month.

        Idempotent: a second run in the same month creates nothing.

        Returns:
            Count of newly created records
        """
        period = month_start(reference_date or self.clock())
        period_end = next_month_start(period)
        settings = await self.settings_service.get_default_settings()

        processed = set(
            (
                await self.session.execute(
                    select(PayrollRecord.employee_id).where(PayrollRecord.month == period)
                )
            )
            .scalars()
            .all()
        )
        employees = (
            await self.session.execute(
                select(Employee).where(Employee.status == EmployeeStatus.ACTIVE.value)
            )
        ).scalars().all()

        created = 0
        for employee in employees:
            if employee.employee_id in processed:
                logger.debug(
                    "Skipping employee %s: payroll exists for %s",
                    employee.employee_id,
                    f"{period:%Y-%m}",
                )
                continue

            days_worked = await self._count_present_days(
                employee.employee_id, period, period_end
            )
            pay = self._compute(
                employee,
                settings,
                days_worked,
                ZERO,
                fallback_model=settings.default_payroll_model,
            )
            stmt = self._insert_statement(
                employee_id=employee.employee_id,
                month=period,
                pay=pay,
                working_days=settings.default_working_days,
                days_worked=days_worked,
            )
            result = await self.session.execute(stmt)
            if result.rowcount > 0:
                created += 1

        logger.info("Bulk payroll for %s created %d record(s)", f"{period:%Y-%m}", created)
        return created

    async def update_status(self, payroll_id: UUID, status: str) -> PayrollRecord:
        """Set a payroll record's status."""
        record = await self.get_record(payroll_id)
        target = PayrollStatusMachine.validate_transition(record.status, status)
        old_status = record.status
        record.status = target.value
        await self.session.flush()
        logger.info(
            "Payroll %s status changed %s -> %s", payroll_id, old_status, target.value
        )
        return record

    async def delete(self, payroll_id: UUID) -> None:
        """Hard-delete a payroll record."""
        record = await self.get_record(payroll_id)
        await self.session.delete(record)
        await self.session.flush()
        logger.info("Deleted payroll %s", payroll_id)

    def _compute(
        self,
        employee: Employee,
        settings: PayrollSettings,
        days_worked: int,
        service_charge: Decimal,
        *,
        fallback_model: str,
    ) -> PayComputation:
        model = resolve_compensation_model(employee.compensation_model, fallback_model)
        return compute_pay(
            model,
            days_worked=days_worked,
            fixed_salary=employee.fixed_salary,
            daily_rate=employee.daily_rate,
            default_daily_rate=settings.default_daily_rate,
            service_charge=service_charge,
        )

    async def _exists(self, employee_id: UUID, period: date) -> bool:
        result = await self.session.execute(
            select(PayrollRecord.payroll_id).where(
                PayrollRecord.employee_id == employee_id,
                PayrollRecord.month == period,
            )
        )
        return result.first() is not None

    async def _count_present_days(
        self, employee_id: UUID, start: date, end_exclusive: date
    ) -> int:
        """Days in [start, end_exclusive) with status present. Late days are not counted."""
        result = await self.session.execute(
            select(func.count())
            .select_from(AttendanceRecord)
            .where(
                AttendanceRecord.employee_id == employee_id,
                AttendanceRecord.day >= start,
                AttendanceRecord.day < end_exclusive,
                AttendanceRecord.status == AttendanceStatus.PRESENT.value,
            )
        )
        return result.scalar_one()

    def _insert_statement(
        self,
        *,
        employee_id: UUID,
        month: date,
        pay: PayComputation,
        working_days: int,
        days_worked: int,
    ):
        """INSERT of a processed record that does nothing if (employee, month) exists."""
        insert = dialect_insert(self.session)
        return (
            insert(PayrollRecord)
            .values(
                employee_id=employee_id,
                month=month,
                base_salary=pay.base_salary,
                working_days=working_days,
                days_worked=days_worked,
                service_charge=pay.service_charge,
                total_payable=pay.total_payable,
                status=PayrollStatus.PROCESSED.value,
            )
            .on_conflict_do_nothing(index_elements=["employee_id", "month"])
        )
