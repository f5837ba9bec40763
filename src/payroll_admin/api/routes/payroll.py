"""Payroll processing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payroll_admin.api.dependencies import DbSession
from payroll_admin.api.schemas import (
    ErrorResponse,
    PaySlipResponse,
    PayrollListResponse,
    PayrollResponse,
    ProcessPayrollRequest,
)
from payroll_admin.services.payroll_processor import PayrollProcessor
from payroll_admin.services.payslip_issuer import PaySlipIssuer

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.post(
    "/process",
    response_model=PayrollResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def process_payroll(db: DbSession, payload: ProcessPayrollRequest) -> PayrollResponse:
    """Process payroll for one employee and pay period."""
    processor = PayrollProcessor(db)
    payroll = await processor.process(
        payload.employee_id, payload.pay_period_start, payload.pay_period_end
    )
    response = PayrollResponse.model_validate(payroll)
    await db.commit()
    return response


@router.get(
    "/{payroll_id}",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(db: DbSession, payroll_id: Annotated[int, Path()]) -> PayrollResponse:
    """Get a payroll by ID."""
    payroll = await PayrollProcessor(db).get_payroll(payroll_id)
    return PayrollResponse.model_validate(payroll)


@router.get("/employee/{employee_id}", response_model=PayrollListResponse)
async def list_employee_payrolls(
    db: DbSession, employee_id: Annotated[int, Path()]
) -> PayrollListResponse:
    """List payrolls of an employee, newest pay period first."""
    payrolls = await PayrollProcessor(db).list_for_employee(employee_id)
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.get("/department/{department_id}", response_model=PayrollListResponse)
async def list_department_payrolls(
    db: DbSession, department_id: Annotated[int, Path()]
) -> PayrollListResponse:
    """List payrolls of a department, newest pay period first."""
    payrolls = await PayrollProcessor(db).list_for_department(department_id)
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.post(
    "/{payroll_id}/payslip",
    response_model=PaySlipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def generate_payslip(db: DbSession, payroll_id: Annotated[int, Path()]) -> PaySlipResponse:
    """Issue the payslip for a payroll. Repeated calls return the same slip."""
    pay_slip = await PaySlipIssuer(db).issue(payroll_id)
    response = PaySlipResponse.model_validate(pay_slip)
    await db.commit()
    return response
