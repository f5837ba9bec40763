"""Session-backed record stores used by the payroll engine.

Each store is a narrow wrapper over an ``AsyncSession``: lookups by id raise
:class:`NotFoundError`, optional lookups return ``None``, and ``save`` adds
and flushes without committing. Commit/rollback belongs to the caller.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.exceptions import NotFoundError
from payroll_admin.models import Department, Employee, PaySlip, Payroll, TimeEntry, TimeEntryStatus


class EmployeeStore:
    """Employee lookups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, employee_id: int) -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", "id", employee_id)
        return employee

    async def save(self, employee: Employee) -> Employee:
        self.session.add(employee)
        await self.session.flush()
        return employee


class DepartmentStore:
    """Department lookups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, department_id: int) -> Department:
        department = await self.session.get(Department, department_id)
        if department is None:
            raise NotFoundError("Department", "id", department_id)
        return department


class TimeEntryStore:
    """Time entry queries and writes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, time_entry_id: int) -> TimeEntry:
        entry = await self.session.get(TimeEntry, time_entry_id)
        if entry is None:
            raise NotFoundError("TimeEntry", "id", time_entry_id)
        return entry

    async def find_for_employee(
        self,
        employee_id: int,
        start: date,
        end: date,
        status: str | None = None,
    ) -> list[TimeEntry]:
        """Entries for an employee with entry_date in [start, end]."""
        query = select(TimeEntry).where(
            TimeEntry.employee_id == employee_id,
            TimeEntry.entry_date.between(start, end),
        )
        if status is not None:
            query = query.where(TimeEntry.status == status)
        query = query.order_by(TimeEntry.entry_date, TimeEntry.time_entry_id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_approved(self, employee_id: int, start: date, end: date) -> list[TimeEntry]:
        """Approved entries for an employee with entry_date in [start, end]."""
        return await self.find_for_employee(
            employee_id, start, end, status=TimeEntryStatus.APPROVED.value
        )

    async def find_by_department(self, department_id: int) -> list[TimeEntry]:
        result = await self.session.execute(
            select(TimeEntry)
            .where(TimeEntry.department_id == department_id)
            .order_by(TimeEntry.entry_date, TimeEntry.time_entry_id)
        )
        return list(result.scalars().all())

    async def save(self, entry: TimeEntry) -> TimeEntry:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def save_all(self, entries: list[TimeEntry]) -> list[TimeEntry]:
        self.session.add_all(entries)
        await self.session.flush()
        return entries

    async def delete(self, entry: TimeEntry) -> None:
        await self.session.delete(entry)
        await self.session.flush()


class PayrollStore:
    """Payroll queries and writes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payroll_id: int) -> Payroll:
        payroll = await self.session.get(Payroll, payroll_id)
        if payroll is None:
            raise NotFoundError("Payroll", "id", payroll_id)
        return payroll

    async def find_by_employee_and_period(
        self, employee_id: int, start: date, end: date
    ) -> Payroll | None:
        result = await self.session.execute(
            select(Payroll).where(
                Payroll.employee_id == employee_id,
                Payroll.pay_period_start == start,
                Payroll.pay_period_end == end,
            )
        )
        return result.scalar_one_or_none()

    async def find_by_employee(self, employee_id: int) -> list[Payroll]:
        result = await self.session.execute(
            select(Payroll)
            .where(Payroll.employee_id == employee_id)
            .order_by(Payroll.pay_period_start.desc(), Payroll.payroll_id.desc())
        )
        return list(result.scalars().all())

    async def find_by_department(
        self,
        department_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Payroll]:
        """Payrolls of a department, optionally with pay_period_start in [start, end]."""
        query = select(Payroll).where(Payroll.department_id == department_id)
        if start is not None:
            query = query.where(Payroll.pay_period_start >= start)
        if end is not None:
            query = query.where(Payroll.pay_period_start <= end)
        query = query.order_by(Payroll.pay_period_start.desc(), Payroll.payroll_id.desc())

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def summarize_department(
        self, department_id: int, start: date, end: date
    ) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        """Return (gross, net, regular hours, overtime hours) sums."""
        result = await self.session.execute(
            select(
                func.coalesce(func.sum(Payroll.gross_pay), 0),
                func.coalesce(func.sum(Payroll.net_pay), 0),
                func.coalesce(func.sum(func.coalesce(Payroll.regular_hours, 0)), 0),
                func.coalesce(func.sum(func.coalesce(Payroll.overtime_hours, 0)), 0),
            ).where(
                Payroll.department_id == department_id,
                Payroll.pay_period_start.between(start, end),
            )
        )
        gross, net, regular, overtime = result.one()
        return (
            Decimal(str(gross)),
            Decimal(str(net)),
            Decimal(str(regular)),
            Decimal(str(overtime)),
        )

    async def save(self, payroll: Payroll) -> Payroll:
        self.session.add(payroll)
        await self.session.flush()
        return payroll


class PaySlipStore:
    """Payslip queries and writes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, pay_slip_id: int) -> PaySlip:
        pay_slip = await self.session.get(PaySlip, pay_slip_id)
        if pay_slip is None:
            raise NotFoundError("PaySlip", "id", pay_slip_id)
        return pay_slip

    async def find_by_payroll_id(self, payroll_id: int) -> PaySlip | None:
        result = await self.session.execute(
            select(PaySlip).where(PaySlip.payroll_id == payroll_id)
        )
        return result.scalar_one_or_none()

    async def find_by_number(self, payslip_number: str) -> PaySlip | None:
        result = await self.session.execute(
            select(PaySlip).where(PaySlip.payslip_number == payslip_number)
        )
        return result.scalar_one_or_none()

    async def find_by_employee(self, employee_id: int) -> list[PaySlip]:
        """Payslips of an employee, newest issue date first."""
        result = await self.session.execute(
            select(PaySlip)
            .join(Payroll, Payroll.payroll_id == PaySlip.payroll_id)
            .where(Payroll.employee_id == employee_id)
            .order_by(PaySlip.issue_date.desc(), PaySlip.pay_slip_id.desc())
        )
        return list(result.scalars().all())

    async def find_all(self) -> list[PaySlip]:
        result = await self.session.execute(
            select(PaySlip).order_by(PaySlip.issue_date.desc(), PaySlip.pay_slip_id.desc())
        )
        return list(result.scalars().all())

    async def save(self, pay_slip: PaySlip) -> PaySlip:
        self.session.add(pay_slip)
        await self.session.flush()
        return pay_slip
