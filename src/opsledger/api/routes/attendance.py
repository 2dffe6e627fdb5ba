"""Attendance API endpoints."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, status

from opsledger.api.dependencies import CurrentPrincipal, DbSession
from opsledger.api.schemas import (
    AttendanceActionRequest,
    AttendanceListResponse,
    AttendanceResponse,
    ErrorResponse,
)
from opsledger.models import AttendanceRecord
from opsledger.services.attendance_service import AttendanceService
from opsledger.services.queries import AttendanceQuery

router = APIRouter(prefix="/attendance", tags=["attendance"])


def to_response(record: AttendanceRecord, employee_name: str | None = None) -> AttendanceResponse:
    response = AttendanceResponse.model_validate(record)
    response.employee_name = employee_name
    return response


@router.post(
    "",
    response_model=AttendanceResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_attendance(
    db: DbSession,
    principal: CurrentPrincipal,
    payload: AttendanceActionRequest,
) -> AttendanceResponse:
    """Check in, check out or mark absent for a day (today by default)."""
    service = AttendanceService(db)
    record = await service.record_action(
        principal,
        payload.action.value,
        employee_id=payload.employee_id,
        day=payload.day,
    )
    return to_response(record)


@router.get(
    "",
    response_model=AttendanceListResponse,
    responses={401: {"model": ErrorResponse}},
)
async def list_attendance(
    db: DbSession,
    principal: CurrentPrincipal,
    day: date | None = None,
    employee_id: UUID | None = None,
) -> AttendanceListResponse:
    """List attendance records. Workers only see their own."""
    service = AttendanceService(db)
    records = await service.list_records(
        principal, AttendanceQuery(day=day, employee_id=employee_id)
    )
    items = [to_response(r, r.employee.name) for r in records]
    return AttendanceListResponse(items=items, total=len(items))
