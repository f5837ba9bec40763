"""Gross pay for the two compensation variants."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Union

from payroll_admin.calculators.types import (
    DEFAULT_HOURS_WORKED,
    DEFAULT_OVERTIME_MULTIPLIER,
    ZERO,
    Compensation,
    HourlyCompensation,
    PayType,
    SalariedCompensation,
    round_to_cents,
    to_decimal,
)

if TYPE_CHECKING:
    from payroll_admin.models import Employee

MONTHS_PER_YEAR = Decimal("12")
HUNDRED = Decimal("100")


def compute_gross_pay(
    subject: Union[Employee, Compensation],
    regular_hours: Decimal | None = None,
    overtime_hours: Decimal | None = None,
) -> Decimal:
    """Compute gross pay for one pay period, rounded half-up to cents.

    Args:
        subject: An employee, or a compensation variant directly.
        regular_hours: Aggregated regular hours for the period, or None when
            the period has no recorded hours.
        overtime_hours: Aggregated overtime hours for the period, or None.

    A missing or non-positive salary/rate yields 0.00 rather than an error.
    """
    if isinstance(subject, (SalariedCompensation, HourlyCompensation)):
        compensation = subject
    else:
        compensation = subject.compensation

    if compensation.pay_type == PayType.SALARIED:
        amount = _salaried_gross(compensation)
    elif compensation.pay_type == PayType.HOURLY:
        amount = _hourly_gross(compensation, regular_hours, overtime_hours)
    else:
        raise TypeError(f"Unsupported compensation type: {type(compensation).__name__}")

    return round_to_cents(amount)


def _salaried_gross(compensation: SalariedCompensation) -> Decimal:
    annual_salary = to_decimal(compensation.annual_salary)
    if annual_salary is None or annual_salary <= 0:
        return ZERO

    gross = annual_salary / MONTHS_PER_YEAR
    bonus_percentage = to_decimal(compensation.bonus_percentage)
    if bonus_percentage is not None and bonus_percentage > 0:
        gross += (annual_salary * bonus_percentage / HUNDRED) / MONTHS_PER_YEAR
    return gross


def _hourly_gross(
    compensation: HourlyCompensation,
    regular_hours: Decimal | None,
    overtime_hours: Decimal | None,
) -> Decimal:
    rate = to_decimal(compensation.hourly_rate)
    if rate is None or rate <= 0:
        return ZERO

    if regular_hours is None and overtime_hours is None:
        # No recorded hours for the period: use the employee's stored defaults
        regular = to_decimal(compensation.hours_worked)
        overtime = to_decimal(compensation.overtime_hours)
        if regular is None:
            regular = DEFAULT_HOURS_WORKED
    else:
        regular = to_decimal(regular_hours)
        overtime = to_decimal(overtime_hours)

    regular = regular if regular is not None else ZERO
    overtime = overtime if overtime is not None else ZERO
    multiplier = to_decimal(compensation.overtime_rate_multiplier)
    if multiplier is None:
        multiplier = DEFAULT_OVERTIME_MULTIPLIER

    return rate * regular + rate * multiplier * overtime
