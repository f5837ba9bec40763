"""Employee compensation endpoint."""

from typing import Annotated

from fastapi import APIRouter, Path

from payroll_admin.api.dependencies import DbSession
from payroll_admin.api.schemas import CompensationUpdate, EmployeeResponse, ErrorResponse
from payroll_admin.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.put(
    "/{employee_id}/compensation",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def change_compensation(
    db: DbSession,
    employee_id: Annotated[int, Path()],
    payload: CompensationUpdate,
) -> EmployeeResponse:
    """Replace an employee's pay basis, converting between salaried and hourly."""
    employee = await EmployeeService(db).change_compensation(
        employee_id, payload.compensation.to_compensation()
    )
    response = EmployeeResponse.model_validate(employee)
    await db.commit()
    return response
