"""Time and attendance entry model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.models.base import Base, TimestampMixin, utcnow


class TimeEntryStatus(str, Enum):
    """Time entry approval status values."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TimeEntrySource(str, Enum):
    """Where a time entry came from."""

    BIOMETRIC = "BIOMETRIC"
    TIMESHEET = "TIMESHEET"
    MANUAL = "MANUAL"
    API = "API"


def hours_between(clock_in: datetime, clock_out: datetime) -> Decimal:
    """Whole minutes between two timestamps, in hours. Non-positive is 0."""
    minutes = int((clock_out - clock_in).total_seconds() // 60)
    if minutes <= 0:
        return Decimal("0")
    return Decimal(minutes) / Decimal(60)


class TimeEntry(Base, TimestampMixin):
    """Imported or manually recorded attendance for one employee and day.

    ``department_id`` is a snapshot taken when the entry is recorded and is
    not updated when the employee later changes department.
    """

    __tablename__ = "time_entry"

    time_entry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    department_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("department.department_id", ondelete="SET NULL"),
        nullable=True,
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    clock_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    clock_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    regular_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)
    overtime_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)
    source: Mapped[str | None] = mapped_column(String(30), nullable=True)
    source_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TimeEntryStatus.PENDING.value
    )
    imported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("ix_time_entry_employee_date", "employee_id", "entry_date"),
        Index("ix_time_entry_status", "status"),
        CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name="time_entry_status_check",
        ),
        CheckConstraint(
            "source IS NULL OR source IN ('BIOMETRIC', 'TIMESHEET', 'MANUAL', 'API')",
            name="time_entry_source_check",
        ),
        CheckConstraint(
            "regular_hours IS NULL OR regular_hours >= 0",
            name="time_entry_regular_hours_check",
        ),
        CheckConstraint(
            "overtime_hours IS NULL OR overtime_hours >= 0",
            name="time_entry_overtime_hours_check",
        ),
    )

    def fill_regular_hours_from_clock(self) -> None:
        """Derive regular hours from the clock times when they were not given."""
        if self.regular_hours is None and self.clock_in is not None and self.clock_out is not None:
            self.regular_hours = hours_between(self.clock_in, self.clock_out)
