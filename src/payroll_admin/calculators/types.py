"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import ClassVar, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

DEFAULT_HOURS_WORKED = Decimal("160")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents), half-up."""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: Decimal | float | int | str | None) -> Decimal | None:
    """Coerce a numeric value to Decimal, keeping None as None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    # str() avoids binary float artefacts (0.1 -> 0.1000000000000000055...)
    return Decimal(str(value))


class PayType(str, Enum):
    """Compensation variant tag."""

    SALARIED = "salaried"
    HOURLY = "hourly"


@dataclass(frozen=True)
class SalariedCompensation:
    """Fixed annual salary with an optional bonus percentage."""

    annual_salary: Decimal | None
    bonus_percentage: Decimal | None = None

    pay_type: ClassVar[PayType] = PayType.SALARIED


@dataclass(frozen=True)
class HourlyCompensation:
    """Hourly rate with stored default hours and an overtime multiplier.

    ``hours_worked`` and ``overtime_hours`` are only used when a pay period
    has no approved time entries.
    """

    hourly_rate: Decimal | None
    hours_worked: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate_multiplier: Decimal | None = DEFAULT_OVERTIME_MULTIPLIER

    pay_type: ClassVar[PayType] = PayType.HOURLY


Compensation = Union[SalariedCompensation, HourlyCompensation]


@dataclass(frozen=True)
class HoursTotals:
    """Approved hours for one employee over a date range."""

    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    entry_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.regular_hours == 0 and self.overtime_hours == 0


@dataclass(frozen=True)
class DeductionBreakdown:
    """Deduction line items and the resulting net pay for one gross amount."""

    gross_pay: Decimal
    income_tax: Decimal
    provident_fund: Decimal
    social_contribution: Decimal
    professional_tax: Decimal
    health_insurance: Decimal
    retirement_contribution: Decimal
    other_deductions: Decimal
    net_pay: Decimal

    @property
    def total(self) -> Decimal:
        """Sum of all deduction line items."""
        return (
            self.income_tax
            + self.provident_fund
            + self.social_contribution
            + self.professional_tax
            + self.health_insurance
            + self.retirement_contribution
            + self.other_deductions
        )


@dataclass(frozen=True)
class DepartmentPayrollSummary:
    """Computed payroll totals for a department over a date range."""

    department_id: int
    department_name: str
    cost_center: str | None
    total_gross_pay: Decimal = ZERO
    total_net_pay: Decimal = ZERO
    total_regular_hours: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO
