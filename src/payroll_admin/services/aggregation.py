"""Rolls approved time entries up into period hour totals."""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.types import ZERO, HoursTotals, round_to_cents
from payroll_admin.exceptions import InvalidInputError
from payroll_admin.stores import TimeEntryStore

logger = logging.getLogger(__name__)


class TimeEntryAggregator:
    """Sums approved regular and overtime hours for an employee.

    Only entries in status APPROVED with ``entry_date`` in ``[start, end]``
    (inclusive) are counted; missing hour values count as zero.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.time_entries = TimeEntryStore(session)

    async def aggregate(self, employee_id: int | None, start: date, end: date) -> HoursTotals:
        """Return rounded (regular, overtime) totals and the entry count."""
        if employee_id is None:
            raise InvalidInputError("Aggregation requires an employee id")
        if start > end:
            raise InvalidInputError(
                f"Aggregation range start {start.isoformat()} is after end {end.isoformat()}"
            )

        entries = await self.time_entries.find_approved(employee_id, start, end)
        regular = sum((entry.regular_hours or ZERO for entry in entries), ZERO)
        overtime = sum((entry.overtime_hours or ZERO for entry in entries), ZERO)
        count = len(entries)
        totals = HoursTotals(
            regular_hours=round_to_cents(regular),
            overtime_hours=round_to_cents(overtime),
            entry_count=count,
        )
        logger.debug(
            "Aggregated %d approved entries for employee %s from %s to %s: %s regular, %s overtime",
            count,
            employee_id,
            start,
            end,
            totals.regular_hours,
            totals.overtime_hours,
        )
        return totals
