"""Employee model with a discriminated compensation payload."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_admin.calculators.types import (
    Compensation,
    HourlyCompensation,
    PayType,
    SalariedCompensation,
)
from payroll_admin.models.base import Base, TimestampMixin


class EmploymentStatus(str, Enum):
    """Employment status values."""

    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    TERMINATED = "Terminated"


class Employee(Base, TimestampMixin):
    """Employee record.

    Identity and contact fields are shared by both pay types. The
    variant-specific columns are only ever read and written together through
    :attr:`compensation`, and the check constraint rejects a row that carries
    the other variant's columns.
    """

    __tablename__ = "employee"

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    city: Mapped[str | None] = mapped_column(String, nullable=True)
    state: Mapped[str | None] = mapped_column(String, nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String, nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EmploymentStatus.ACTIVE.value
    )
    department_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("department.department_id", ondelete="SET NULL"),
        nullable=True,
    )

    # Variant tag and payload
    pay_type: Mapped[str] = mapped_column(String(20), nullable=False)
    annual_salary: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    bonus_percentage: Mapped[Decimal | None] = mapped_column(Numeric(7, 4), nullable=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 4), nullable=True)
    hours_worked: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    overtime_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    overtime_rate_multiplier: Mapped[Decimal | None] = mapped_column(
        Numeric(6, 3), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('Active', 'On Leave', 'Terminated')",
            name="employee_status_check",
        ),
        CheckConstraint(
            "(pay_type = 'salaried' AND hourly_rate IS NULL AND hours_worked IS NULL "
            "AND overtime_hours IS NULL AND overtime_rate_multiplier IS NULL) "
            "OR (pay_type = 'hourly' AND annual_salary IS NULL AND bonus_percentage IS NULL)",
            name="employee_single_variant_check",
        ),
    )

    def __init__(self, *, compensation: Compensation | None = None, **kwargs):
        super().__init__(**kwargs)
        if compensation is not None:
            self.compensation = compensation

    @property
    def compensation(self) -> Compensation:
        """Current pay basis as a tagged variant."""
        if self.pay_type == PayType.SALARIED:
            return SalariedCompensation(
                annual_salary=self.annual_salary,
                bonus_percentage=self.bonus_percentage,
            )
        if self.pay_type == PayType.HOURLY:
            return HourlyCompensation(
                hourly_rate=self.hourly_rate,
                hours_worked=self.hours_worked,
                overtime_hours=self.overtime_hours,
                overtime_rate_multiplier=self.overtime_rate_multiplier,
            )
        raise ValueError(f"Unknown pay type '{self.pay_type}' for employee {self.employee_id}")

    @compensation.setter
    def compensation(self, value: Compensation) -> None:
        # Every variant column is assigned, so no column of the previous
        # variant survives the swap.
        if isinstance(value, SalariedCompensation):
            self.pay_type = PayType.SALARIED.value
            self.annual_salary = value.annual_salary
            self.bonus_percentage = value.bonus_percentage
            self.hourly_rate = None
            self.hours_worked = None
            self.overtime_hours = None
            self.overtime_rate_multiplier = None
        elif isinstance(value, HourlyCompensation):
            self.pay_type = PayType.HOURLY.value
            self.annual_salary = None
            self.bonus_percentage = None
            self.hourly_rate = value.hourly_rate
            self.hours_worked = value.hours_worked
            self.overtime_hours = value.overtime_hours
            self.overtime_rate_multiplier = value.overtime_rate_multiplier
        else:
            raise TypeError(f"Unsupported compensation type: {type(value).__name__}")
