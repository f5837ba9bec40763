"""Department payroll summary endpoint."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from payroll_admin.api.dependencies import DbSession
from payroll_admin.api.schemas import DepartmentPayrollSummaryResponse, ErrorResponse
from payroll_admin.services.department_summary import DepartmentPayrollSummarizer

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get(
    "/{department_id}/payroll-summary",
    response_model=DepartmentPayrollSummaryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def department_payroll_summary(
    db: DbSession,
    department_id: Annotated[int, Path()],
    start: Annotated[date, Query()],
    end: Annotated[date, Query()],
) -> DepartmentPayrollSummaryResponse:
    """Sum payroll totals of a department for pay periods starting in [start, end]."""
    summary = await DepartmentPayrollSummarizer(db).summarize(department_id, start, end)
    return DepartmentPayrollSummaryResponse.model_validate(summary)
