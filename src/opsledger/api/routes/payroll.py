"""Payroll and payroll settings API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from opsledger.api.dependencies import AdminPrincipal, CurrentPrincipal, DbSession
from opsledger.api.schemas import (
    DeletedResponse,
    ErrorResponse,
    PayrollBulkRequest,
    PayrollBulkResponse,
    PayrollListResponse,
    PayrollProcessRequest,
    PayrollResponse,
    PayrollSettingsResponse,
    PayrollSettingsUpdate,
    PayrollStatusUpdate,
)
from opsledger.services.payroll_service import PayrollService
from opsledger.services.queries import PayrollQuery
from opsledger.services.settings_service import PayrollSettingsService

router = APIRouter(tags=["payroll"])


# ============================================================================
# Payroll settings
# ============================================================================


@router.get(
    "/payroll-settings",
    response_model=PayrollSettingsResponse,
    responses={403: {"model": ErrorResponse}},
)
async def get_payroll_settings(
    db: DbSession,
    _: AdminPrincipal,
) -> PayrollSettingsResponse:
    """Get the organization payroll defaults (seeded if absent)."""
    settings = await PayrollSettingsService(db).get_default_settings()
    return PayrollSettingsResponse.model_validate(settings)


@router.put(
    "/payroll-settings",
    response_model=PayrollSettingsResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def update_payroll_settings(
    db: DbSession,
    _: AdminPrincipal,
    payload: PayrollSettingsUpdate,
) -> PayrollSettingsResponse:
    """Replace the organization payroll defaults."""
    settings = await PayrollSettingsService(db).update_settings(
        payload.default_payroll_model.value,
        payload.default_working_days,
        payload.default_daily_rate,
    )
    return PayrollSettingsResponse.model_validate(settings)


# ============================================================================
# Payroll records
# ============================================================================


@router.get(
    "/payroll",
    response_model=PayrollListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_payroll(
    db: DbSession,
    principal: CurrentPrincipal,
    month: date | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> PayrollListResponse:
    """List payroll records, newest month first. Workers only see their own."""
    records = await PayrollService(db).list_records(
        principal, PayrollQuery(month=month, status=status_filter)
    )
    items = []
    for record in records:
        response = PayrollResponse.model_validate(record)
        response.employee_name = record.employee.name
        items.append(response)
    return PayrollListResponse(items=items, total=len(items))


@router.post(
    "/payroll",
    response_model=PayrollResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def process_payroll(
    db: DbSession,
    _: AdminPrincipal,
    payload: PayrollProcessRequest,
) -> PayrollResponse:
    """Process payroll for one employee for one month (current month by default)."""
    record = await PayrollService(db).process_single(
        payload.employee_id,
        payload.days_worked,
        service_charge=payload.service_charge,
        month=payload.month,
    )
    return PayrollResponse.model_validate(record)


@router.post(
    "/payroll/bulk-process",
    response_model=PayrollBulkResponse,
    responses={403: {"model": ErrorResponse}},
)
async def process_payroll_bulk(
    db: DbSession,
    _: AdminPrincipal,
    payload: PayrollBulkRequest | None = None,
) -> PayrollBulkResponse:
    """Process payroll for every active employee not yet processed this month."""
    reference_date = payload.reference_date if payload else None
    created = await PayrollService(db).process_bulk(reference_date)
    return PayrollBulkResponse(created_count=created)


@router.patch(
    "/payroll/{payroll_id}",
    response_model=PayrollResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_payroll_status(
    db: DbSession,
    _: AdminPrincipal,
    payroll_id: Annotated[UUID, Path()],
    payload: PayrollStatusUpdate,
) -> PayrollResponse:
    """Set a payroll record's status."""
    record = await PayrollService(db).update_status(payroll_id, payload.status.value)
    return PayrollResponse.model_validate(record)


@router.delete(
    "/payroll/{payroll_id}",
    response_model=DeletedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_payroll(
    db: DbSession,
    _: AdminPrincipal,
    payroll_id: Annotated[UUID, Path()],
) -> DeletedResponse:
    """Hard-delete a payroll record."""
    await PayrollService(db).delete(payroll_id)
    return DeletedResponse(id=payroll_id)
