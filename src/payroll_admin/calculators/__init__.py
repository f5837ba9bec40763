"""Pure payroll calculations."""

from payroll_admin.calculators.compensation import compute_gross_pay
from payroll_admin.calculators.deductions import deduct
from payroll_admin.calculators.types import (
    Compensation,
    DeductionBreakdown,
    DepartmentPayrollSummary,
    HourlyCompensation,
    HoursTotals,
    PayType,
    SalariedCompensation,
    round_to_cents,
)

__all__ = [
    "compute_gross_pay",
    "deduct",
    "Compensation",
    "DeductionBreakdown",
    "DepartmentPayrollSummary",
    "HourlyCompensation",
    "HoursTotals",
    "PayType",
    "SalariedCompensation",
    "round_to_cents",
]
