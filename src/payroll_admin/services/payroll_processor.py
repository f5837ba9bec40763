"""Payroll processor - turns compensation and approved hours into a payroll record."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.compensation import compute_gross_pay
from payroll_admin.calculators.deductions import deduct
from payroll_admin.config import Settings, get_settings
from payroll_admin.exceptions import AlreadyProcessedError, InvalidInputError
from payroll_admin.models import Payroll
from payroll_admin.services.aggregation import TimeEntryAggregator
from payroll_admin.stores import EmployeeStore, PayrollStore

logger = logging.getLogger(__name__)

PROCESSING_NOTE = "Processed by payroll engine"


class PayrollProcessor:
    """Processes one employee for one pay period, at most once.

    Pipeline (stable order):
    1) Validate the period
    2) Load the employee
    3) Reject an already processed (employee, period)
    4) Aggregate approved hours
    5) Compute gross pay
    6) Compute deductions and net pay
    7) Persist the payroll record

    The (employee, period start, period end) unique constraint is the real
    guard; the lookup in step 3 only avoids doing the work for a known
    duplicate. The processor flushes but never commits.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.today = today
        self.employees = EmployeeStore(session)
        self.payrolls = PayrollStore(session)
        self.aggregator = TimeEntryAggregator(session)

    async def process(self, employee_id: int, period_start: date, period_end: date) -> Payroll:
        """Compute and persist the payroll for an employee and pay period.

        Raises:
            InvalidInputError: If the period is missing or inverted
            NotFoundError: If the employee does not exist
            AlreadyProcessedError: If a payroll exists for the same period

        A concurrent writer that wins the race on the unique constraint
        causes this session to be rolled back before AlreadyProcessedError
        is raised; any other integrity failure propagates unchanged.
        """
        if period_start is None or period_end is None:
            raise InvalidInputError("Pay period start and end are required")
        if period_start > period_end:
            raise InvalidInputError(
                f"Pay period start {period_start.isoformat()} is after end {period_end.isoformat()}"
            )

        employee = await self.employees.get_by_id(employee_id)

        existing = await self.payrolls.find_by_employee_and_period(
            employee_id, period_start, period_end
        )
        if existing is not None:
            raise AlreadyProcessedError(employee_id, period_start, period_end)

        totals = await self.aggregator.aggregate(employee_id, period_start, period_end)

        # Empty totals mean no recorded hours: the hourly model falls back
        # to the employee's stored defaults.
        if totals.is_empty:
            gross_pay = compute_gross_pay(employee)
        else:
            gross_pay = compute_gross_pay(employee, totals.regular_hours, totals.overtime_hours)

        if gross_pay == 0:
            logger.warning(
                "Gross pay is zero for employee %s (%s) for %s to %s",
                employee_id,
                employee.pay_type,
                period_start,
                period_end,
            )

        breakdown = deduct(gross_pay)

        payroll = Payroll(
            employee_id=employee.employee_id,
            department_id=employee.department_id,
            pay_period_start=period_start,
            pay_period_end=period_end,
            gross_pay=breakdown.gross_pay,
            income_tax=breakdown.income_tax,
            provident_fund=breakdown.provident_fund,
            social_contribution=breakdown.social_contribution,
            professional_tax=breakdown.professional_tax,
            health_insurance=breakdown.health_insurance,
            retirement_contribution=breakdown.retirement_contribution,
            other_deductions=breakdown.other_deductions,
            net_pay=breakdown.net_pay,
            regular_hours=totals.regular_hours,
            overtime_hours=totals.overtime_hours,
            processing_date=self.today(),
            payment_method=self.settings.default_payment_method,
            notes=PROCESSING_NOTE,
        )

        try:
            await self.payrolls.save(payroll)
        except IntegrityError:
            await self.session.rollback()
            winner = await self.payrolls.find_by_employee_and_period(
                employee_id, period_start, period_end
            )
            if winner is not None:
                logger.info(
                    "Concurrent payroll for employee %s, %s to %s already written as %s",
                    employee_id,
                    period_start,
                    period_end,
                    winner.payroll_id,
                )
                raise AlreadyProcessedError(employee_id, period_start, period_end)
            raise

        logger.info(
            "Processed payroll %s for employee %s, %s to %s: gross %s net %s",
            payroll.payroll_id,
            employee_id,
            period_start,
            period_end,
            payroll.gross_pay,
            payroll.net_pay,
        )
        return payroll

    async def get_payroll(self, payroll_id: int) -> Payroll:
        """Load a payroll by id."""
        return await self.payrolls.get_by_id(payroll_id)

    async def list_for_employee(self, employee_id: int) -> list[Payroll]:
        """Payrolls of an employee, newest pay period first."""
        return await self.payrolls.find_by_employee(employee_id)

    async def list_for_department(self, department_id: int) -> list[Payroll]:
        """Payrolls whose department snapshot matches, newest pay period first."""
        return await self.payrolls.find_by_department(department_id)
