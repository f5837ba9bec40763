"""ORM models."""

from payroll_admin.models.base import Base, TimestampMixin
from payroll_admin.models.department import Department
from payroll_admin.models.employee import Employee, EmploymentStatus
from payroll_admin.models.payroll import PaySlip, Payroll
from payroll_admin.models.time_entry import TimeEntry, TimeEntrySource, TimeEntryStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "Department",
    "Employee",
    "EmploymentStatus",
    "PaySlip",
    "Payroll",
    "TimeEntry",
    "TimeEntrySource",
    "TimeEntryStatus",
]
