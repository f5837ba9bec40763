"""Employee compensation changes."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.types import Compensation
from payroll_admin.models import Employee
from payroll_admin.stores import EmployeeStore

logger = logging.getLogger(__name__)


class EmployeeService:
    """Replaces an employee's compensation variant."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.employees = EmployeeStore(session)

    async def change_compensation(self, employee_id: int, compensation: Compensation) -> Employee:
        """Replace the employee's pay basis with a caller-supplied variant.

        Converting between salaried and hourly discards the old variant's
        values; identity, contact, status and department are left as they
        are.

        Raises:
            NotFoundError: If the employee does not exist
        """
        employee = await self.employees.get_by_id(employee_id)
        previous = employee.pay_type

        employee.compensation = compensation
        await self.employees.save(employee)

        logger.info(
            "Employee %s compensation changed from %s to %s",
            employee_id,
            previous,
            employee.pay_type,
        )
        return employee
