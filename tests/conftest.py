"""Pytest fixtures for opsledger tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from opsledger.database import get_engine, make_session_factory
from opsledger.models import (
    AttendanceRecord,
    AttendanceStatus,
    Base,
    CompensationModel,
    Employee,
    EmployeeStatus,
)

# In-memory SQLite, one database per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with all tables."""
    engine = get_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with make_session_factory(engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def admin(session: AsyncSession) -> Employee:
    """An admin on a fixed salary."""
    employee = Employee(
        employee_id=uuid4(),
        name="Ada Admin",
        email="ada@example.com",
        role="admin",
        compensation_model=CompensationModel.FIXED_SALARY.value,
        fixed_salary=Decimal("3000.00"),
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def daily_worker(session: AsyncSession) -> Employee:
    """A worker paid 100 per present day."""
    employee = Employee(
        employee_id=uuid4(),
        name="Dana Daily",
        email="dana@example.com",
        role="worker",
        compensation_model=CompensationModel.DAILY_RATE.value,
        daily_rate=Decimal("100.00"),
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def salaried_worker(session: AsyncSession) -> Employee:
    """A worker on a 2500 fixed monthly salary."""
    employee = Employee(
        employee_id=uuid4(),
        name="Sam Salaried",
        email="sam@example.com",
        role="worker",
        compensation_model=CompensationModel.FIXED_SALARY.value,
        fixed_salary=Decimal("2500.00"),
    )
    session.add(employee)
    await session.flush()
    return employee


@pytest.fixture
async def inactive_worker(session: AsyncSession) -> Employee:
    employee = Employee(
        employee_id=uuid4(),
        name="Ian Inactive",
        email="ian@example.com",
        role="worker",
        compensation_model=CompensationModel.DAILY_RATE.value,
        daily_rate=Decimal("80.00"),
        status=EmployeeStatus.INACTIVE.value,
    )
    session.add(employee)
    await session.flush()
    return employee


async def _add_attendance(
    session: AsyncSession,
    employee: Employee,
    first_day: date,
    count: int,
    status: AttendanceStatus = AttendanceStatus.PRESENT,
) -> list[AttendanceRecord]:
    """Insert ``count`` consecutive attendance days starting at ``first_day``."""
    records = []
    for offset in range(count):
        day = first_day + timedelta(days=offset)
        present = status != AttendanceStatus.ABSENT
        records.append(
            AttendanceRecord(
                employee_id=employee.employee_id,
                day=day,
                status=status.value,
                check_in_time=datetime.combine(day, time(9)) if present else None,
                check_out_time=datetime.combine(day, time(17)) if present else None,
                working_hours=8.0 if present else 0.0,
            )
        )
    session.add_all(records)
    await session.flush()
    return records


@pytest.fixture
def add_attendance(session: AsyncSession):
    """Factory fixture: ``await add_attendance(employee, first_day, count, status)``."""

    async def _add(
        employee: Employee,
        first_day: date,
        count: int,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
    ) -> list[AttendanceRecord]:
        return await _add_attendance(session, employee, first_day, count, status)

    return _add
