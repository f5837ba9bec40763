"""Time entry endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from payroll_admin.api.dependencies import DbSession
from payroll_admin.api.schemas import (
    ErrorResponse,
    TimeEntryCreate,
    TimeEntryListResponse,
    TimeEntryResponse,
    TimeEntryStatusUpdate,
)
from payroll_admin.models import TimeEntryStatus
from payroll_admin.services.time_entry_service import TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["time-entries"])


@router.post(
    "",
    response_model=TimeEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_time_entry(db: DbSession, payload: TimeEntryCreate) -> TimeEntryResponse:
    """Record a single time entry."""
    entry = await TimeEntryService(db).record_entry(payload.to_request())
    response = TimeEntryResponse.model_validate(entry)
    await db.commit()
    return response


@router.post(
    "/import",
    response_model=TimeEntryListResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def import_time_entries(
    db: DbSession, payload: list[TimeEntryCreate]
) -> TimeEntryListResponse:
    """Import a batch of time entries; nothing is saved if any entry is invalid."""
    entries = await TimeEntryService(db).import_entries([p.to_request() for p in payload])
    response = TimeEntryListResponse(
        items=[TimeEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )
    await db.commit()
    return response


@router.get("/employee/{employee_id}", response_model=TimeEntryListResponse)
async def list_employee_time_entries(
    db: DbSession,
    employee_id: Annotated[int, Path()],
    start: Annotated[date, Query()],
    end: Annotated[date, Query()],
    status_filter: Annotated[TimeEntryStatus | None, Query(alias="status")] = None,
) -> TimeEntryListResponse:
    """List an employee's time entries in a date range."""
    entries = await TimeEntryService(db).list_entries(employee_id, start, end, status_filter)
    return TimeEntryListResponse(
        items=[TimeEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )


@router.put(
    "/{time_entry_id}/status",
    response_model=TimeEntryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_time_entry_status(
    db: DbSession,
    time_entry_id: Annotated[int, Path()],
    payload: TimeEntryStatusUpdate,
) -> TimeEntryResponse:
    """Approve, reject or reset a time entry."""
    entry = await TimeEntryService(db).update_status(
        time_entry_id, payload.status, payload.approved_by
    )
    response = TimeEntryResponse.model_validate(entry)
    await db.commit()
    return response


@router.delete(
    "/{time_entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_time_entry(db: DbSession, time_entry_id: Annotated[int, Path()]) -> Response:
    """Delete a time entry."""
    await TimeEntryService(db).delete_entry(time_entry_id)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
