"""Tests for payroll processing."""

import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from payroll_admin.calculators.types import SalariedCompensation
from payroll_admin.exceptions import AlreadyProcessedError, InvalidInputError, NotFoundError
from payroll_admin.models import Employee, Payroll, TimeEntry
from payroll_admin.services.payroll_processor import PROCESSING_NOTE, PayrollProcessor

JAN_START = date(2024, 1, 1)
JAN_END = date(2024, 1, 31)


async def _payroll_count(session) -> int:
    result = await session.execute(select(func.count(Payroll.payroll_id)))
    return result.scalar_one()


class TestProcessSalaried:
    """Test processing a salaried employee."""

    async def test_amounts_and_metadata(self, session, settings, today, salaried_employee):
        processor = PayrollProcessor(session, settings=settings, today=today)
        payroll = await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)

        assert payroll.payroll_id is not None
        assert payroll.gross_pay == Decimal("5500.00")
        assert payroll.income_tax == Decimal("550.00")
        assert payroll.provident_fund == Decimal("660.00")
        assert payroll.social_contribution == Decimal("41.25")
        assert payroll.professional_tax == Decimal("200.00")
        assert payroll.health_insurance == Decimal("1500.00")
        assert payroll.retirement_contribution == Decimal("275.00")
        assert payroll.other_deductions == Decimal("0.00")
        assert payroll.net_pay == Decimal("2273.75")
        assert payroll.net_pay == payroll.gross_pay - payroll.total_deductions

        assert payroll.regular_hours == Decimal("0.00")
        assert payroll.overtime_hours == Decimal("0.00")
        assert payroll.processing_date == today()
        assert payroll.payment_method == "Bank Transfer"
        assert payroll.notes == PROCESSING_NOTE

    async def test_department_is_snapshotted(
        self, session, settings, today, salaried_employee, department, other_department
    ):
        processor = PayrollProcessor(session, settings=settings, today=today)
        payroll = await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await session.commit()

        salaried_employee.department_id = other_department.department_id
        await session.commit()
        await session.refresh(payroll)

        assert payroll.department_id == department.department_id


class TestProcessHourly:
    """Test processing an hourly employee."""

    async def test_fallback_without_entries(self, session, settings, today, hourly_employee):
        """No approved entries: 140 stored hours at 25.00."""
        processor = PayrollProcessor(session, settings=settings, today=today)
        payroll = await processor.process(hourly_employee.employee_id, JAN_START, JAN_END)

        assert payroll.gross_pay == Decimal("3500.00")
        assert payroll.net_pay == Decimal("828.75")
        assert payroll.regular_hours == Decimal("0.00")

    async def test_pending_entries_do_not_count(self, session, settings, today, hourly_employee):
        session.add(
            TimeEntry(
                employee_id=hourly_employee.employee_id,
                entry_date=date(2024, 1, 10),
                regular_hours=Decimal("8"),
                status="PENDING",
            )
        )
        await session.flush()

        processor = PayrollProcessor(session, settings=settings, today=today)
        payroll = await processor.process(hourly_employee.employee_id, JAN_START, JAN_END)

        assert payroll.gross_pay == Decimal("3500.00")

    async def test_approved_entries(self, session, settings, today, hourly_employee):
        for day, overtime in ((10, Decimal("2")), (11, None)):
            session.add(
                TimeEntry(
                    employee_id=hourly_employee.employee_id,
                    entry_date=date(2024, 1, day),
                    regular_hours=Decimal("8"),
                    overtime_hours=overtime,
                    status="APPROVED",
                )
            )
        await session.flush()

        processor = PayrollProcessor(session, settings=settings, today=today)
        payroll = await processor.process(hourly_employee.employee_id, JAN_START, JAN_END)

        # 16 * 25.00 + 2 * 25.00 * 1.5
        assert payroll.gross_pay == Decimal("475.00")
        assert payroll.regular_hours == Decimal("16.00")
        assert payroll.overtime_hours == Decimal("2.00")
        assert payroll.social_contribution == Decimal("3.5625")
        assert payroll.net_pay == Decimal("-1356.8125")


class TestIdempotence:
    """Test that a period is processed at most once."""

    async def test_second_call_is_rejected(self, session, settings, today, salaried_employee):
        processor = PayrollProcessor(session, settings=settings, today=today)
        await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await session.commit()

        with pytest.raises(AlreadyProcessedError) as exc_info:
            await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)

        assert exc_info.value.employee_id == salaried_employee.employee_id
        assert exc_info.value.period_start == JAN_START
        assert await _payroll_count(session) == 1

    async def test_overlapping_period_is_distinct(
        self, session, settings, today, salaried_employee
    ):
        processor = PayrollProcessor(session, settings=settings, today=today)
        await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await processor.process(salaried_employee.employee_id, JAN_START, date(2024, 1, 15))

        assert await _payroll_count(session) == 2

    async def test_lost_race_becomes_already_processed(
        self, session, settings, today, salaried_employee, monkeypatch
    ):
        """A duplicate that slips past the lookup hits the unique constraint."""
        processor = PayrollProcessor(session, settings=settings, today=today)
        await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await session.commit()

        real_lookup = processor.payrolls.find_by_employee_and_period
        calls = []

        async def stale_lookup(employee_id, start, end):
            calls.append((employee_id, start, end))
            if len(calls) == 1:
                return None
            return await real_lookup(employee_id, start, end)

        monkeypatch.setattr(processor.payrolls, "find_by_employee_and_period", stale_lookup)

        with pytest.raises(AlreadyProcessedError):
            await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)

        assert len(calls) == 2
        assert await _payroll_count(session) == 1


class TestValidation:
    """Test rejected requests."""

    async def test_unknown_employee(self, session, settings, today):
        processor = PayrollProcessor(session, settings=settings, today=today)

        with pytest.raises(NotFoundError) as exc_info:
            await processor.process(999, JAN_START, JAN_END)

        assert "Employee not found with id: '999'" in str(exc_info.value)

    async def test_inverted_period(self, session, settings, today, salaried_employee):
        processor = PayrollProcessor(session, settings=settings, today=today)

        with pytest.raises(InvalidInputError):
            await processor.process(salaried_employee.employee_id, JAN_END, JAN_START)

        assert await _payroll_count(session) == 0

    async def test_missing_period(self, session, settings, today, salaried_employee):
        processor = PayrollProcessor(session, settings=settings, today=today)

        with pytest.raises(InvalidInputError):
            await processor.process(salaried_employee.employee_id, None, JAN_END)

    async def test_zero_gross_is_logged(self, session, settings, today, department, caplog):
        employee = Employee(
            first_name="Zero",
            last_name="Salary",
            email="zero@example.com",
            hire_date=date(2023, 1, 1),
            department_id=department.department_id,
            compensation=SalariedCompensation(annual_salary=Decimal("0")),
        )
        session.add(employee)
        await session.commit()

        processor = PayrollProcessor(session, settings=settings, today=today)
        with caplog.at_level(logging.WARNING, logger="payroll_admin.services.payroll_processor"):
            payroll = await processor.process(employee.employee_id, JAN_START, JAN_END)

        assert payroll.gross_pay == Decimal("0.00")
        assert payroll.net_pay == Decimal("-1700.00")
        assert "Gross pay is zero" in caplog.text


class TestListing:
    """Test read-back helpers."""

    async def test_list_for_employee_newest_first(
        self, session, settings, today, salaried_employee
    ):
        processor = PayrollProcessor(session, settings=settings, today=today)
        await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await processor.process(salaried_employee.employee_id, date(2024, 2, 1), date(2024, 2, 29))

        payrolls = await processor.list_for_employee(salaried_employee.employee_id)
        assert [p.pay_period_start for p in payrolls] == [date(2024, 2, 1), JAN_START]

    async def test_list_for_department(
        self, session, settings, today, salaried_employee, hourly_employee, department
    ):
        processor = PayrollProcessor(session, settings=settings, today=today)
        await processor.process(salaried_employee.employee_id, JAN_START, JAN_END)
        await processor.process(hourly_employee.employee_id, JAN_START, JAN_END)

        payrolls = await processor.list_for_department(department.department_id)
        assert len(payrolls) == 2

    async def test_get_unknown_payroll(self, session, settings, today):
        with pytest.raises(NotFoundError):
            await PayrollProcessor(session, settings=settings, today=today).get_payroll(42)
