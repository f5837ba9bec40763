"""Pytest fixtures for payroll administration tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.types import HourlyCompensation, SalariedCompensation
from payroll_admin.config import Settings
from payroll_admin.database import create_schema, get_engine, make_session_factory
from payroll_admin.models import Department, Employee

TODAY = date(2024, 2, 5)


@pytest.fixture
async def engine(tmp_path):
    """Create a file-backed SQLite engine with the schema in place.

    A file rather than ``:memory:`` so that every pooled connection sees
    the same tables.
    """
    engine = get_engine(f"sqlite+aiosqlite:///{tmp_path / 'payroll.db'}")
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = make_session_factory(engine)

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def settings() -> Settings:
    """Explicit settings so tests never read the environment."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        create_schema=False,
        default_payment_method="Bank Transfer",
        payslip_payment_delay_days=7,
    )


@pytest.fixture
def today():
    """Fixed clock for processing and issue dates."""
    return lambda: TODAY


@pytest.fixture
async def department(session: AsyncSession) -> Department:
    """Create the engineering department."""
    department = Department(name="Engineering", cost_center="CC-100")
    session.add(department)
    await session.commit()
    return department


@pytest.fixture
async def other_department(session: AsyncSession) -> Department:
    """Create a second department for transfer scenarios."""
    department = Department(name="Operations", cost_center="CC-200")
    session.add(department)
    await session.commit()
    return department


@pytest.fixture
async def salaried_employee(session: AsyncSession, department: Department) -> Employee:
    """Salaried employee: 60,000 a year with a 10% bonus (5,500.00 a month)."""
    employee = Employee(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        hire_date=date(2020, 3, 1),
        department_id=department.department_id,
        compensation=SalariedCompensation(
            annual_salary=Decimal("60000.00"),
            bonus_percentage=Decimal("10"),
        ),
    )
    session.add(employee)
    await session.commit()
    return employee


@pytest.fixture
async def hourly_employee(session: AsyncSession, department: Department) -> Employee:
    """Hourly employee: 25.00 an hour with 140 stored default hours."""
    employee = Employee(
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        hire_date=date(2021, 6, 15),
        department_id=department.department_id,
        compensation=HourlyCompensation(
            hourly_rate=Decimal("25.00"),
            hours_worked=Decimal("140"),
            overtime_hours=None,
            overtime_rate_multiplier=Decimal("1.5"),
        ),
    )
    session.add(employee)
    await session.commit()
    return employee
