"""Payroll and payslip models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.models.base import Base, TimestampMixin, utcnow


class Payroll(Base, TimestampMixin):
    """One processed pay period for one employee.

    Written once by the payroll processor and never updated.
    ``department_id`` is the employee's department at processing time.
    """

    __tablename__ = "payroll"

    payroll_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="RESTRICT"),
        nullable=False,
    )
    department_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("department.department_id", ondelete="SET NULL"),
        nullable=True,
    )
    pay_period_start: Mapped[date] = mapped_column(Date, nullable=False)
    pay_period_end: Mapped[date] = mapped_column(Date, nullable=False)

    gross_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    # Deduction lines and net pay keep the unrounded percentage amounts
    income_tax: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    provident_fund: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    social_contribution: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    professional_tax: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    health_insurance: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    retirement_contribution: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)
    other_deductions: Mapped[Decimal] = mapped_column(
        Numeric(18, 6), nullable=False, default=Decimal("0.00")
    )
    net_pay: Mapped[Decimal] = mapped_column(Numeric(18, 6), nullable=False)

    regular_hours: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    overtime_hours: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )

    processing_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    payment_method: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "employee_id",
            "pay_period_start",
            "pay_period_end",
            name="payroll_employee_period_unique",
        ),
        CheckConstraint("pay_period_end >= pay_period_start", name="payroll_period_dates_check"),
    )

    @property
    def total_deductions(self) -> Decimal:
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


class PaySlip(Base, TimestampMixin):
    """Issued payslip; at most one per payroll."""

    __tablename__ = "pay_slip"

    pay_slip_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payroll_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
    )
    payslip_number: Mapped[str] = mapped_column(String(40), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    payment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    bank_account_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Generated")
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("payroll_id", name="pay_slip_payroll_unique"),
        UniqueConstraint("payslip_number", name="pay_slip_number_unique"),
    )
