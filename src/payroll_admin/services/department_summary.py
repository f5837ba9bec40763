"""Department-level payroll totals."""

from __future__ import annotations

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.types import DepartmentPayrollSummary, round_to_cents
from payroll_admin.exceptions import InvalidInputError
from payroll_admin.stores import DepartmentStore, PayrollStore


class DepartmentPayrollSummarizer:
    """Sums persisted payrolls of a department over a date range.

    Payrolls are matched on their department snapshot and on
    ``pay_period_start`` falling in ``[start, end]``. Nothing is cached; each
    call reads the current rows.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.departments = DepartmentStore(session)
        self.payrolls = PayrollStore(session)

    async def summarize(
        self, department_id: int, start: date, end: date
    ) -> DepartmentPayrollSummary:
        """Return gross, net and hour totals for the department.

        Net pay is summed at stored precision, so it equals the sum of the
        matching payrolls' ``net_pay`` exactly.
        """
        if start > end:
            raise InvalidInputError(
                f"Summary range start {start.isoformat()} is after end {end.isoformat()}"
            )

        department = await self.departments.get_by_id(department_id)
        gross, net, regular, overtime = await self.payrolls.summarize_department(
            department_id, start, end
        )

        return DepartmentPayrollSummary(
            department_id=department.department_id,
            department_name=department.name,
            cost_center=department.cost_center,
            total_gross_pay=round_to_cents(gross),
            total_net_pay=net,
            total_regular_hours=round_to_cents(regular),
            total_overtime_hours=round_to_cents(overtime),
        )
