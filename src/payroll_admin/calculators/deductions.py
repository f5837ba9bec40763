"""Statutory and benefit deductions.

The schedule is a flat simplification, not jurisdiction-specific tax law.
Real tax logic should replace :func:`deduct` behind the same signature.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_admin.calculators.types import ZERO, DeductionBreakdown, round_to_cents, to_decimal

# Percentage-of-gross deductions
INCOME_TAX_RATE = Decimal("0.10")
PROVIDENT_FUND_RATE = Decimal("0.12")
SOCIAL_CONTRIBUTION_RATE = Decimal("0.0075")
RETIREMENT_CONTRIBUTION_RATE = Decimal("0.05")

# Fixed deductions per pay period
PROFESSIONAL_TAX = Decimal("200.00")
HEALTH_INSURANCE = Decimal("1500.00")


def deduct(gross_pay: Decimal) -> DeductionBreakdown:
    """Compute every deduction line and the net pay for a gross amount.

    Gross pay is taken at cent precision; the percentage lines are kept
    unrounded (at most six decimal places for a cent amount), so
    ``net_pay == gross_pay - total`` holds exactly. Net pay is not floored
    at zero.
    """
    gross = round_to_cents(to_decimal(gross_pay))

    income_tax = gross * INCOME_TAX_RATE
    provident_fund = gross * PROVIDENT_FUND_RATE
    social_contribution = gross * SOCIAL_CONTRIBUTION_RATE
    retirement_contribution = gross * RETIREMENT_CONTRIBUTION_RATE
    other_deductions = ZERO

    total = (
        income_tax
        + provident_fund
        + social_contribution
        + PROFESSIONAL_TAX
        + HEALTH_INSURANCE
        + retirement_contribution
        + other_deductions
    )

    return DeductionBreakdown(
        gross_pay=gross,
        income_tax=income_tax,
        provident_fund=provident_fund,
        social_contribution=social_contribution,
        professional_tax=PROFESSIONAL_TAX,
        health_insurance=HEALTH_INSURANCE,
        retirement_contribution=retirement_contribution,
        other_deductions=other_deductions,
        net_pay=gross - total,
    )
