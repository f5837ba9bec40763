"""Domain errors raised by the payroll engine."""

from __future__ import annotations

from datetime import date
from typing import Any


class PayrollError(Exception):
    """Base class for all payroll engine errors."""


class NotFoundError(PayrollError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} not found with {field}: '{value}'")


class AlreadyProcessedError(PayrollError):
    """Raised when a payroll already exists for an employee and pay period."""

    def __init__(self, employee_id: int, period_start: date, period_end: date):
        self.employee_id = employee_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"Payroll already processed for employee {employee_id} "
            f"and pay period {period_start.isoformat()} to {period_end.isoformat()}"
        )


class InvalidInputError(PayrollError):
    """Raised when a request is malformed and is rejected before any write."""


class PaySlipNumberExhaustedError(PayrollError):
    """Raised when every drawn payslip number was already taken."""

    def __init__(self, payroll_id: int, attempts: int):
        self.payroll_id = payroll_id
        self.attempts = attempts
        super().__init__(
            f"No free payslip number for payroll {payroll_id} after {attempts} attempts"
        )
