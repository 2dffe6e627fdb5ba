"""Tests for the payroll engine."""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from opsledger.auth import Principal, Role
from opsledger.errors import ConflictError, NotFoundError, ValidationError
from opsledger.models import AttendanceStatus, PayrollRecord
from opsledger.services.payroll_service import PayrollService
from opsledger.services.queries import PayrollQuery
from opsledger.services.settings_service import PayrollSettingsService

MARCH = date(2026, 3, 1)


def fixed_clock():
    return datetime(2026, 3, 15, 12, 0)


async def count_records(session, month=MARCH) -> int:
    return await session.scalar(
        select(func.count()).select_from(PayrollRecord).where(PayrollRecord.month == month)
    )


class TestProcessSingle:
    async def test_daily_rate_employee(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)

        record = await service.process_single(
            daily_worker.employee_id, 18, service_charge=Decimal("50")
        )

        assert record.month == MARCH
        assert record.base_salary == Decimal("100")
        assert record.days_worked == 18
        assert record.total_payable == Decimal("1850")
        assert record.status == "processed"

    async def test_fixed_salary_uses_twenty_working_days(self, session, salaried_worker):
        await PayrollSettingsService(session).update_settings("fixed_salary", 22, Decimal("100"))
        service = PayrollService(session, clock=fixed_clock)

        record = await service.process_single(salaried_worker.employee_id, 5)

        assert record.working_days == 20
        assert record.base_salary == Decimal("2500")
        assert record.total_payable == Decimal("2500")
        assert record.service_charge == Decimal("0")

    async def test_month_is_normalized(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)

        record = await service.process_single(
            daily_worker.employee_id, 1, month=date(2026, 5, 23)
        )

        assert record.month == date(2026, 5, 1)

    async def test_second_run_same_month_conflicts(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)
        await service.process_single(daily_worker.employee_id, 10)

        with pytest.raises(ConflictError):
            await service.process_single(daily_worker.employee_id, 12)

        assert await count_records(session) == 1

    async def test_unknown_employee(self, session):
        with pytest.raises(NotFoundError):
            await PayrollService(session, clock=fixed_clock).process_single(uuid4(), 10)

    async def test_missing_days_worked(self, session, daily_worker):
        with pytest.raises(ValidationError):
            await PayrollService(session).process_single(daily_worker.employee_id, None)

    async def test_negative_inputs(self, session, daily_worker):
        service = PayrollService(session)
        with pytest.raises(ValidationError):
            await service.process_single(daily_worker.employee_id, -1)
        with pytest.raises(ValidationError):
            await service.process_single(
                daily_worker.employee_id, 3, service_charge=Decimal("-5")
            )

    async def test_employee_without_model_is_paid_fixed_salary(self, session, salaried_worker):
        salaried_worker.compensation_model = None
        await PayrollSettingsService(session).update_settings("daily_rate", 20, Decimal("90"))

        record = await PayrollService(session, clock=fixed_clock).process_single(
            salaried_worker.employee_id, 3
        )

        assert record.base_salary == Decimal("2500")
        assert record.total_payable == Decimal("2500")

    async def test_daily_rate_without_own_rate_uses_settings_rate(self, session, daily_worker):
        daily_worker.daily_rate = None
        await PayrollSettingsService(session).update_settings("fixed_salary", 20, Decimal("90"))

        record = await PayrollService(session, clock=fixed_clock).process_single(
            daily_worker.employee_id, 10
        )

        assert record.base_salary == Decimal("90")
        assert record.total_payable == Decimal("900")

    async def test_lost_race_reports_conflict(self, session, daily_worker, monkeypatch):
        service = PayrollService(session, clock=fixed_clock)
        first = await service.process_single(daily_worker.employee_id, 10)

        async def not_found(employee_id, period):
            return False

        # Another writer landed between the existence check and the insert
        monkeypatch.setattr(service, "_exists", not_found)

        with pytest.raises(ConflictError):
            await service.process_single(daily_worker.employee_id, 12)

        assert await count_records(session) == 1
        stored = await session.scalar(
            select(PayrollRecord.days_worked).where(
                PayrollRecord.payroll_id == first.payroll_id
            )
        )
        assert stored == 10


class TestProcessBulk:
    async def test_twenty_present_days_at_one_hundred(
        self, session, daily_worker, add_attendance
    ):
        await add_attendance(daily_worker, MARCH, 20)

        created = await PayrollService(session).process_bulk(date(2026, 3, 28))

        assert created == 1
        record = (
            await session.execute(
                select(PayrollRecord).where(PayrollRecord.employee_id == daily_worker.employee_id)
            )
        ).scalar_one()
        assert record.base_salary == Decimal("100")
        assert record.days_worked == 20
        assert record.total_payable == Decimal("2000")
        assert record.status == "processed"

    async def test_second_run_creates_nothing(
        self, session, daily_worker, salaried_worker, add_attendance
    ):
        await add_attendance(daily_worker, MARCH, 5)
        service = PayrollService(session)

        assert await service.process_bulk(MARCH) == 2
        assert await service.process_bulk(MARCH) == 0
        assert await count_records(session) == 2

    async def test_skips_employee_processed_individually(
        self, session, daily_worker, salaried_worker
    ):
        service = PayrollService(session, clock=fixed_clock)
        await service.process_single(daily_worker.employee_id, 7)

        assert await service.process_bulk(MARCH) == 1
        assert await count_records(session) == 2

    async def test_only_present_days_counted(self, session, daily_worker, add_attendance):
        await add_attendance(daily_worker, MARCH, 4)
        await add_attendance(daily_worker, date(2026, 3, 10), 3, AttendanceStatus.LATE)
        await add_attendance(daily_worker, date(2026, 3, 20), 2, AttendanceStatus.ABSENT)
        # Outside the month
        await add_attendance(daily_worker, date(2026, 4, 1), 2)

        await PayrollService(session).process_bulk(MARCH)

        record = (await session.execute(select(PayrollRecord))).scalar_one()
        assert record.days_worked == 4
        assert record.total_payable == Decimal("400")

    async def test_uses_configured_working_days(self, session, salaried_worker):
        await PayrollSettingsService(session).update_settings("fixed_salary", 22, Decimal("100"))

        await PayrollService(session).process_bulk(MARCH)

        record = (await session.execute(select(PayrollRecord))).scalar_one()
        assert record.working_days == 22
        assert record.total_payable == Decimal("2500")

    async def test_employee_without_model_uses_settings_default(
        self, session, daily_worker, add_attendance
    ):
        daily_worker.compensation_model = None
        await add_attendance(daily_worker, MARCH, 6)
        await PayrollSettingsService(session).update_settings("daily_rate", 20, Decimal("90"))

        await PayrollService(session).process_bulk(MARCH)

        record = (await session.execute(select(PayrollRecord))).scalar_one()
        assert record.base_salary == Decimal("100")
        assert record.total_payable == Decimal("600")

    async def test_concurrent_insert_is_skipped(self, session, daily_worker, monkeypatch):
        service = PayrollService(session)
        count_present_days = service._count_present_days

        async def count_then_insert(employee_id, start, end_exclusive):
            # Another writer creates the record after the processed set was read
            session.add(
                PayrollRecord(
                    employee_id=employee_id,
                    month=start,
                    base_salary=Decimal("1"),
                    working_days=20,
                    days_worked=0,
                    total_payable=Decimal("1"),
                    status="pending",
                )
            )
            await session.flush()
            return await count_present_days(employee_id, start, end_exclusive)

        monkeypatch.setattr(service, "_count_present_days", count_then_insert)

        assert await service.process_bulk(MARCH) == 0

        record = (await session.execute(select(PayrollRecord))).scalar_one()
        assert record.status == "pending"
        assert record.total_payable == Decimal("1")

    async def test_inactive_employees_skipped(self, session, inactive_worker):
        assert await PayrollService(session).process_bulk(MARCH) == 0


class TestStatusAndDelete:
    async def test_update_status(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)
        record = await service.process_single(daily_worker.employee_id, 10)

        updated = await service.update_status(record.payroll_id, "paid")
        assert updated.status == "paid"

        updated = await service.update_status(record.payroll_id, "pending")
        assert updated.status == "pending"

    async def test_update_status_unknown_value(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)
        record = await service.process_single(daily_worker.employee_id, 10)

        with pytest.raises(ValidationError):
            await service.update_status(record.payroll_id, "void")

    async def test_update_status_missing_record(self, session):
        with pytest.raises(NotFoundError):
            await PayrollService(session).update_status(uuid4(), "paid")

    async def test_delete(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)
        record = await service.process_single(daily_worker.employee_id, 10)

        await service.delete(record.payroll_id)

        assert await count_records(session) == 0
        with pytest.raises(NotFoundError):
            await service.delete(record.payroll_id)


class TestListRecords:
    async def test_worker_sees_own_records(self, session, admin, daily_worker, salaried_worker):
        service = PayrollService(session, clock=fixed_clock)
        await service.process_bulk(MARCH)

        worker = Principal(user_id=daily_worker.employee_id, role=Role.WORKER)
        records = await service.list_records(worker)

        assert [r.employee_id for r in records] == [daily_worker.employee_id]

    async def test_admin_filters_by_month_and_status(self, session, daily_worker):
        service = PayrollService(session, clock=fixed_clock)
        march = await service.process_single(daily_worker.employee_id, 10)
        await service.process_single(daily_worker.employee_id, 10, month=date(2026, 4, 1))
        await service.update_status(march.payroll_id, "paid")
        admin = Principal(user_id=uuid4(), role=Role.ADMIN)

        all_records = await service.list_records(admin)
        assert [r.month for r in all_records] == [date(2026, 4, 1), MARCH]

        paid = await service.list_records(admin, PayrollQuery(status="paid"))
        assert [r.payroll_id for r in paid] == [march.payroll_id]

        in_march = await service.list_records(admin, PayrollQuery(month=date(2026, 3, 9)))
        assert [r.payroll_id for r in in_march] == [march.payroll_id]

    async def test_unknown_status_filter(self, session):
        admin = Principal(user_id=uuid4(), role=Role.ADMIN)
        with pytest.raises(ValidationError):
            await PayrollService(session).list_records(admin, PayrollQuery(status="late"))
