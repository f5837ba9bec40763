"""Payslip read endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from payroll_admin.api.dependencies import DbSession
from payroll_admin.api.schemas import ErrorResponse, PaySlipListResponse, PaySlipResponse
from payroll_admin.services.payslip_issuer import PaySlipIssuer

router = APIRouter(prefix="/payslips", tags=["payslips"])


@router.get("", response_model=PaySlipListResponse)
async def list_payslips(db: DbSession) -> PaySlipListResponse:
    """List all payslips, newest first."""
    pay_slips = await PaySlipIssuer(db).list_all()
    return PaySlipListResponse(
        items=[PaySlipResponse.model_validate(p) for p in pay_slips],
        total=len(pay_slips),
    )


@router.get(
    "/{pay_slip_id}",
    response_model=PaySlipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payslip(db: DbSession, pay_slip_id: Annotated[int, Path()]) -> PaySlipResponse:
    """Get a payslip by ID."""
    pay_slip = await PaySlipIssuer(db).get_payslip(pay_slip_id)
    return PaySlipResponse.model_validate(pay_slip)


@router.get("/employee/{employee_id}", response_model=PaySlipListResponse)
async def list_employee_payslips(
    db: DbSession, employee_id: Annotated[int, Path()]
) -> PaySlipListResponse:
    """List payslips of an employee, newest first."""
    pay_slips = await PaySlipIssuer(db).list_for_employee(employee_id)
    return PaySlipListResponse(
        items=[PaySlipResponse.model_validate(p) for p in pay_slips],
        total=len(pay_slips),
    )


@router.get(
    "/employee/{employee_id}/latest",
    response_model=PaySlipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def latest_employee_payslip(
    db: DbSession, employee_id: Annotated[int, Path()]
) -> PaySlipResponse:
    """Get the most recent payslip of an employee."""
    pay_slip = await PaySlipIssuer(db).latest_for_employee(employee_id)
    return PaySlipResponse.model_validate(pay_slip)
