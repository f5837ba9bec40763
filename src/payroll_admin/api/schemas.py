"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from payroll_admin.calculators.types import (
    DEFAULT_OVERTIME_MULTIPLIER,
    Compensation,
    HourlyCompensation,
    SalariedCompensation,
)
from payroll_admin.models import TimeEntrySource, TimeEntryStatus
from payroll_admin.services.time_entry_service import TimeEntryRequest


# ============================================================================
# Payroll schemas
# ============================================================================


class ProcessPayrollRequest(BaseModel):
    """Schema for processing payroll for one employee and period."""

    employee_id: int
    pay_period_start: date
    pay_period_end: date


class PayrollResponse(BaseModel):
    """Schema for payroll response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: int
    employee_id: int
    department_id: int | None = None
    pay_period_start: date
    pay_period_end: date
    gross_pay: Decimal
    income_tax: Decimal
    provident_fund: Decimal
    social_contribution: Decimal
    professional_tax: Decimal
    health_insurance: Decimal
    retirement_contribution: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    processing_date: date
    payment_method: str | None = None
    notes: str | None = None


class PayrollListResponse(BaseModel):
    """Schema for listing payrolls."""

    items: list[PayrollResponse]
    total: int


# ============================================================================
# PaySlip schemas
# ============================================================================


class PaySlipResponse(BaseModel):
    """Schema for payslip response."""

    model_config = ConfigDict(from_attributes=True)

    pay_slip_id: int
    payroll_id: int
    payslip_number: str
    issue_date: date
    payment_date: date | None = None
    bank_account_number: str | None = None
    status: str
    generated_at: datetime


class PaySlipListResponse(BaseModel):
    """Schema for listing payslips."""

    items: list[PaySlipResponse]
    total: int


# ============================================================================
# Department summary schemas
# ============================================================================


class DepartmentPayrollSummaryResponse(BaseModel):
    """Schema for department payroll summary."""

    model_config = ConfigDict(from_attributes=True)

    department_id: int
    department_name: str
    cost_center: str | None = None
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_regular_hours: Decimal
    total_overtime_hours: Decimal


# ============================================================================
# Time entry schemas
# ============================================================================


class TimeEntryCreate(BaseModel):
    """Schema for recording a time entry."""

    employee_id: int | None = None
    department_id: int | None = None
    entry_date: date | None = None
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    regular_hours: Decimal | None = Field(default=None, ge=0)
    overtime_hours: Decimal | None = Field(default=None, ge=0)
    source: TimeEntrySource | None = None
    source_reference: str | None = Field(default=None, max_length=100)
    status: TimeEntryStatus | None = None
    notes: str | None = Field(default=None, max_length=255)

    def to_request(self) -> TimeEntryRequest:
        return TimeEntryRequest(**self.model_dump())


class TimeEntryResponse(BaseModel):
    """Schema for time entry response."""

    model_config = ConfigDict(from_attributes=True)

    time_entry_id: int
    employee_id: int
    department_id: int | None = None
    entry_date: date
    clock_in: datetime | None = None
    clock_out: datetime | None = None
    regular_hours: Decimal | None = None
    overtime_hours: Decimal | None = None
    source: str | None = None
    source_reference: str | None = None
    status: str
    imported_at: datetime
    approved_at: datetime | None = None
    approved_by: str | None = None
    notes: str | None = None


class TimeEntryListResponse(BaseModel):
    """Schema for listing time entries."""

    items: list[TimeEntryResponse]
    total: int


class TimeEntryStatusUpdate(BaseModel):
    """Schema for an approval status change."""

    status: TimeEntryStatus
    approved_by: str | None = Field(default=None, max_length=100)


# ============================================================================
# Employee compensation schemas
# ============================================================================


class SalariedCompensationPayload(BaseModel):
    """Salaried pay basis."""

    pay_type: Literal["salaried"]
    annual_salary: Decimal = Field(gt=0)
    bonus_percentage: Decimal | None = Field(default=None, ge=0)

    def to_compensation(self) -> Compensation:
        return SalariedCompensation(
            annual_salary=self.annual_salary,
            bonus_percentage=self.bonus_percentage,
        )


class HourlyCompensationPayload(BaseModel):
    """Hourly pay basis."""

    pay_type: Literal["hourly"]
    hourly_rate: Decimal = Field(gt=0)
    hours_worked: Decimal | None = Field(default=None, ge=0)
    overtime_hours: Decimal | None = Field(default=None, ge=0)
    overtime_rate_multiplier: Decimal = Field(default=DEFAULT_OVERTIME_MULTIPLIER, gt=0)

    def to_compensation(self) -> Compensation:
        return HourlyCompensation(
            hourly_rate=self.hourly_rate,
            hours_worked=self.hours_worked,
            overtime_hours=self.overtime_hours,
            overtime_rate_multiplier=self.overtime_rate_multiplier,
        )


CompensationPayload = Annotated[
    Union[SalariedCompensationPayload, HourlyCompensationPayload],
    Field(discriminator="pay_type"),
]


class CompensationUpdate(BaseModel):
    """Schema for replacing an employee's compensation."""

    compensation: CompensationPayload


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    first_name: str
    last_name: str
    email: str
    status: str
    department_id: int | None = None
    hire_date: date
    pay_type: str
    annual_salary: Decimal | None = None
    bonus_percentage: Decimal | None = None
    hourly_rate: Decimal | None = None
    hours_worked: Decimal | None = None
    overtime_hours: Decimal | None = None
    overtime_rate_multiplier: Decimal | None = None


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
