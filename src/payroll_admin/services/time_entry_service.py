"""Time entry ingestion and approval."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.calculators.types import to_decimal
from payroll_admin.exceptions import InvalidInputError
from payroll_admin.models import TimeEntry, TimeEntrySource, TimeEntryStatus
from payroll_admin.models.base import utcnow
from payroll_admin.services.state_machine import TimeEntryStateMachine
from payroll_admin.stores import DepartmentStore, EmployeeStore, TimeEntryStore

logger = logging.getLogger(__name__)


@dataclass
class TimeEntryRequest:
    """Input for recording one time entry."""

    employee_id: int | None
    entry_date: date | None
    department_id: int | None = None
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    regular_hours: Decimal | None = None
    overtime_hours: Decimal | None = None
    source: TimeEntrySource | str | None = None
    source_reference: str | None = None
    status: TimeEntryStatus | str | None = None
    notes: str | None = None


class TimeEntryService:
    """Records, lists, approves and deletes time entries.

    Operations:
    - record_entry: validate and persist one entry
    - import_entries: persist a batch, all or nothing
    - list_entries / list_for_department: read back entries
    - update_status: approve, reject or reset an entry
    - delete_entry: remove an entry
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.employees = EmployeeStore(session)
        self.departments = DepartmentStore(session)
        self.time_entries = TimeEntryStore(session)

    async def record_entry(self, request: TimeEntryRequest) -> TimeEntry:
        """Persist a single time entry."""
        entry = await self._build_entry(request)
        await self.time_entries.save(entry)
        logger.info(
            "Recorded time entry %s for employee %s on %s",
            entry.time_entry_id,
            entry.employee_id,
            entry.entry_date,
        )
        return entry

    async def import_entries(self, requests: list[TimeEntryRequest] | None) -> list[TimeEntry]:
        """Persist a batch of entries.

        Every request is validated before anything is written, so a bad
        request leaves the batch unsaved.
        """
        if not requests:
            return []

        entries = [await self._build_entry(request) for request in requests]
        await self.time_entries.save_all(entries)
        logger.info("Imported %d time entries", len(entries))
        return entries

    async def list_entries(
        self,
        employee_id: int,
        start: date,
        end: date,
        status: TimeEntryStatus | str | None = None,
    ) -> list[TimeEntry]:
        """List an employee's entries in a date range, optionally by status."""
        if start > end:
            raise InvalidInputError(
                f"Range start {start.isoformat()} is after end {end.isoformat()}"
            )
        status_value = TimeEntryStatus(status).value if status is not None else None
        return await self.time_entries.find_for_employee(employee_id, start, end, status_value)

    async def list_for_department(self, department_id: int) -> list[TimeEntry]:
        """List entries whose department snapshot matches."""
        await self.departments.get_by_id(department_id)
        return await self.time_entries.find_by_department(department_id)

    async def update_status(
        self,
        time_entry_id: int,
        status: TimeEntryStatus | str,
        approved_by: str | None = None,
    ) -> TimeEntry:
        """Transition an entry's approval status.

        Raises:
            NotFoundError: If the entry does not exist
            InvalidTransitionError: If the move is not allowed
        """
        entry = await self.time_entries.get_by_id(time_entry_id)
        from_status = entry.status
        TimeEntryStateMachine.apply(entry, status, approved_by=approved_by)
        await self.session.flush()
        logger.info(
            "Time entry %s status %s -> %s (by %s)",
            time_entry_id,
            from_status,
            entry.status,
            approved_by,
        )
        return entry

    async def delete_entry(self, time_entry_id: int) -> None:
        """Delete an entry."""
        entry = await self.time_entries.get_by_id(time_entry_id)
        await self.time_entries.delete(entry)
        logger.info("Deleted time entry %s", time_entry_id)

    async def _build_entry(self, request: TimeEntryRequest | None) -> TimeEntry:
        if request is None or request.employee_id is None:
            raise InvalidInputError("Time entry must include an employee_id")
        if request.entry_date is None:
            raise InvalidInputError("Time entry must include an entry_date")

        employee = await self.employees.get_by_id(request.employee_id)

        if request.department_id is not None:
            department = await self.departments.get_by_id(request.department_id)
            department_id = department.department_id
        else:
            # Snapshot; not updated if the employee changes department later
            department_id = employee.department_id

        try:
            source = TimeEntrySource(request.source).value if request.source else None
            status = (
                TimeEntryStatus(request.status).value
                if request.status
                else TimeEntryStatus.PENDING.value
            )
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

        if request.clock_in is not None and request.clock_out is not None:
            if (request.clock_in.utcoffset() is None) != (request.clock_out.utcoffset() is None):
                raise InvalidInputError(
                    "Time entry clock_in and clock_out must both include a timezone or both omit it"
                )

        regular_hours = to_decimal(request.regular_hours)
        overtime_hours = to_decimal(request.overtime_hours)
        for label, value in (("regular_hours", regular_hours), ("overtime_hours", overtime_hours)):
            if value is not None and value < 0:
                raise InvalidInputError(f"Time entry {label} must not be negative")

        entry = TimeEntry(
            employee_id=employee.employee_id,
            department_id=department_id,
            entry_date=request.entry_date,
            clock_in=request.clock_in,
            clock_out=request.clock_out,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            source=source,
            source_reference=request.source_reference,
            status=status,
            notes=request.notes,
        )
        entry.fill_regular_hours_from_clock()
        if status == TimeEntryStatus.APPROVED:
            entry.approved_at = entry.imported_at = utcnow()
        return entry
