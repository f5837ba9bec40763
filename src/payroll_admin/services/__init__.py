"""Payroll engine services."""

from payroll_admin.services.aggregation import TimeEntryAggregator
from payroll_admin.services.department_summary import DepartmentPayrollSummarizer
from payroll_admin.services.employee_service import EmployeeService
from payroll_admin.services.payroll_processor import PayrollProcessor
from payroll_admin.services.payslip_issuer import PaySlipIssuer
from payroll_admin.services.state_machine import InvalidTransitionError, TimeEntryStateMachine
from payroll_admin.services.time_entry_service import TimeEntryRequest, TimeEntryService

__all__ = [
    "DepartmentPayrollSummarizer",
    "EmployeeService",
    "InvalidTransitionError",
    "PaySlipIssuer",
    "PayrollProcessor",
    "TimeEntryAggregator",
    "TimeEntryRequest",
    "TimeEntryService",
    "TimeEntryStateMachine",
]
