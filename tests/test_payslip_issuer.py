"""Tests for payslip issuing."""

import random
import re
from dataclasses import replace
from datetime import date, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from payroll_admin.exceptions import NotFoundError, PaySlipNumberExhaustedError
from payroll_admin.models import PaySlip, Payroll
from payroll_admin.services.payroll_processor import PayrollProcessor
from payroll_admin.services.payslip_issuer import (
    MAX_NUMBER_ATTEMPTS,
    PaySlipIssuer,
    mask_bank_account,
    payslip_number,
)

JAN_START = date(2024, 1, 1)


class ScriptedRandom(random.Random):
    """Random source that replays a fixed sequence of suffixes."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def randint(self, a, b):
        return self.values.pop(0) if len(self.values) > 1 else self.values[0]


async def _slip_count(session) -> int:
    result = await session.execute(select(func.count(PaySlip.pay_slip_id)))
    return result.scalar_one()


async def _payroll_count(session) -> int:
    result = await session.execute(select(func.count(Payroll.payroll_id)))
    return result.scalar_one()


async def _number_is_free(payslip_number):
    """Stands in for a lookup that ran before a concurrent insert."""
    return None


@pytest.fixture
async def payroll(session, settings, today, salaried_employee):
    processor = PayrollProcessor(session, settings=settings, today=today)
    payroll = await processor.process(salaried_employee.employee_id, JAN_START, date(2024, 1, 31))
    await session.commit()
    return payroll


@pytest.fixture
async def second_payroll(session, settings, today, salaried_employee):
    """A second payroll in the same month, so numbers can collide."""
    processor = PayrollProcessor(session, settings=settings, today=today)
    payroll = await processor.process(
        salaried_employee.employee_id, date(2024, 1, 16), date(2024, 1, 31)
    )
    await session.commit()
    return payroll


class TestFormatting:
    """Test number and account formatting."""

    def test_payslip_number(self):
        assert payslip_number(7, date(2024, 3, 1), 42) == "PS-7-202403-0042"
        assert payslip_number(123, date(2023, 12, 31), 9999) == "PS-123-202312-9999"

    def test_mask_bank_account(self):
        assert mask_bank_account(7) == "XXXX-XXXX-0007"
        assert mask_bank_account(12345) == "XXXX-XXXX-12345"


class TestIssue:
    """Test issuing payslips."""

    async def test_first_issue(self, session, settings, today, payroll, salaried_employee):
        issuer = PaySlipIssuer(session, settings=settings, today=today)
        pay_slip = await issuer.issue(payroll.payroll_id)

        assert pay_slip.pay_slip_id is not None
        assert pay_slip.payroll_id == payroll.payroll_id
        assert re.fullmatch(
            rf"PS-{salaried_employee.employee_id}-202401-\d{{4}}", pay_slip.payslip_number
        )
        assert pay_slip.issue_date == today()
        assert pay_slip.payment_date == today() + timedelta(days=7)
        assert pay_slip.bank_account_number == mask_bank_account(salaried_employee.employee_id)
        assert pay_slip.status == "Generated"
        assert pay_slip.generated_at is not None

    async def test_issue_is_idempotent(self, session, settings, today, payroll):
        issuer = PaySlipIssuer(session, settings=settings, today=today)
        first = await issuer.issue(payroll.payroll_id)
        await session.commit()

        second = await issuer.issue(payroll.payroll_id)

        assert second.pay_slip_id == first.pay_slip_id
        assert second.payslip_number == first.payslip_number
        assert await _slip_count(session) == 1

    async def test_payment_delay_is_configurable(self, session, settings, today, payroll):
        issuer = PaySlipIssuer(
            session, settings=replace(settings, payslip_payment_delay_days=3), today=today
        )
        pay_slip = await issuer.issue(payroll.payroll_id)

        assert pay_slip.payment_date == today() + timedelta(days=3)

    async def test_unknown_payroll(self, session, settings, today):
        with pytest.raises(NotFoundError):
            await PaySlipIssuer(session, settings=settings, today=today).issue(404)

    async def test_number_collision_draws_again(
        self, session, settings, today, payroll, second_payroll
    ):
        issuer = PaySlipIssuer(
            session, settings=settings, today=today, rng=ScriptedRandom([42, 42, 7])
        )
        first = await issuer.issue(payroll.payroll_id)
        first_number = first.payslip_number
        await session.commit()

        second = await issuer.issue(second_payroll.payroll_id)

        assert first_number.endswith("-0042")
        assert second.payslip_number.endswith("-0007")
        assert await _slip_count(session) == 2

    async def test_collisions_give_up_after_max_attempts(
        self, session, settings, today, payroll, second_payroll
    ):
        issuer = PaySlipIssuer(session, settings=settings, today=today, rng=ScriptedRandom([42]))
        await issuer.issue(payroll.payroll_id)
        await session.commit()

        with pytest.raises(PaySlipNumberExhaustedError) as exc_info:
            await issuer.issue(second_payroll.payroll_id)

        assert exc_info.value.attempts == MAX_NUMBER_ATTEMPTS == 5
        assert await _slip_count(session) == 1

    async def test_collision_keeps_uncommitted_payroll(
        self, session, settings, today, payroll, salaried_employee
    ):
        """Processing and issuing in one unit of work survives a taken number."""
        issuer = PaySlipIssuer(
            session, settings=settings, today=today, rng=ScriptedRandom([42, 42, 7])
        )
        await issuer.issue(payroll.payroll_id)
        await session.commit()

        processor = PayrollProcessor(session, settings=settings, today=today)
        pending = await processor.process(
            salaried_employee.employee_id, date(2024, 1, 16), date(2024, 1, 31)
        )
        pending_id = pending.payroll_id

        pay_slip = await issuer.issue(pending_id)
        number = pay_slip.payslip_number
        await session.commit()

        assert number.endswith("-0007")
        assert await session.get(Payroll, pending_id) is not None
        assert await _payroll_count(session) == 2
        assert await _slip_count(session) == 2


class TestConcurrentIssue:
    """Test collisions that slip past the number lookup."""

    async def test_lost_race_draws_again(
        self, session, settings, today, payroll, second_payroll, monkeypatch
    ):
        issuer = PaySlipIssuer(
            session, settings=settings, today=today, rng=ScriptedRandom([42, 42, 7])
        )
        first = await issuer.issue(payroll.payroll_id)
        first_number = first.payslip_number
        second_id = second_payroll.payroll_id
        await session.commit()

        monkeypatch.setattr(issuer.pay_slips, "find_by_number", _number_is_free)
        second = await issuer.issue(second_id)

        assert first_number.endswith("-0042")
        assert second.payslip_number.endswith("-0007")
        assert second.payroll_id == second_id
        assert await _slip_count(session) == 2

    async def test_lost_race_with_uncommitted_payroll(
        self, session, settings, today, payroll, salaried_employee, monkeypatch
    ):
        """The rollback discards the pending payroll, which is reported as missing."""
        issuer = PaySlipIssuer(session, settings=settings, today=today, rng=ScriptedRandom([42]))
        await issuer.issue(payroll.payroll_id)
        await session.commit()

        processor = PayrollProcessor(session, settings=settings, today=today)
        pending = await processor.process(
            salaried_employee.employee_id, date(2024, 1, 16), date(2024, 1, 31)
        )
        pending_id = pending.payroll_id

        monkeypatch.setattr(issuer.pay_slips, "find_by_number", _number_is_free)
        with pytest.raises(NotFoundError) as exc_info:
            await issuer.issue(pending_id)

        assert exc_info.value.entity == "Payroll"
        assert await _payroll_count(session) == 1
        assert await _slip_count(session) == 1

    async def test_lost_races_give_up_after_max_attempts(
        self, session, settings, today, payroll, second_payroll, monkeypatch
    ):
        issuer = PaySlipIssuer(session, settings=settings, today=today, rng=ScriptedRandom([42]))
        await issuer.issue(payroll.payroll_id)
        second_id = second_payroll.payroll_id
        await session.commit()

        monkeypatch.setattr(issuer.pay_slips, "find_by_number", _number_is_free)
        with pytest.raises(IntegrityError):
            await issuer.issue(second_id)

        await session.rollback()
        assert await _slip_count(session) == 1


class TestLookups:
    """Test payslip read-back."""

    async def test_latest_for_employee(
        self, session, settings, today, payroll, second_payroll, salaried_employee
    ):
        issuer = PaySlipIssuer(session, settings=settings, today=today)
        await issuer.issue(payroll.payroll_id)
        later = PaySlipIssuer(session, settings=settings, today=lambda: date(2024, 2, 20))
        newest = await later.issue(second_payroll.payroll_id)

        latest = await issuer.latest_for_employee(salaried_employee.employee_id)
        assert latest.pay_slip_id == newest.pay_slip_id

        slips = await issuer.list_for_employee(salaried_employee.employee_id)
        assert [s.pay_slip_id for s in slips][0] == newest.pay_slip_id
        assert len(slips) == 2
        assert len(await issuer.list_all()) == 2

    async def test_latest_without_payslips(self, session, settings, today, hourly_employee):
        with pytest.raises(NotFoundError) as exc_info:
            await PaySlipIssuer(session, settings=settings, today=today).latest_for_employee(
                hourly_employee.employee_id
            )

        assert exc_info.value.entity == "PaySlip"

    async def test_get_unknown_payslip(self, session, settings, today):
        with pytest.raises(NotFoundError):
            await PaySlipIssuer(session, settings=settings, today=today).get_payslip(1)
