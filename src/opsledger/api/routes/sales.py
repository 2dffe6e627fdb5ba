"""Sales record API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from opsledger.api.dependencies import AdminPrincipal, DbSession
from opsledger.api.schemas import (
    DeletedResponse,
    ErrorResponse,
    SaleCreate,
    SaleResponse,
    SaleUpdate,
)
from opsledger.services.queries import DateRange, SalesQuery
from opsledger.services.records_service import RecordsService

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("", response_model=list[SaleResponse])
async def list_sales(
    db: DbSession,
    _: AdminPrincipal,
    start_date: date | None = None,
    end_date: date | None = None,
    employee_id: UUID | None = None,
) -> list[SaleResponse]:
    """List sales newest first, optionally within an inclusive date range."""
    sales = await RecordsService(db).list_sales(
        SalesQuery(period=DateRange(start_date, end_date), employee_id=employee_id)
    )
    return [SaleResponse.model_validate(s) for s in sales]


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_sale(
    db: DbSession,
    principal: AdminPrincipal,
    payload: SaleCreate,
) -> SaleResponse:
    sale = await RecordsService(db).create_sale(
        principal,
        payload.amount,
        payload.client_name,
        description=payload.description,
        date=payload.date,
    )
    return SaleResponse.model_validate(sale)


@router.put(
    "/{sale_id}",
    response_model=SaleResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_sale(
    db: DbSession,
    _: AdminPrincipal,
    sale_id: Annotated[UUID, Path()],
    payload: SaleUpdate,
) -> SaleResponse:
    sale = await RecordsService(db).update_sale(
        sale_id, **payload.model_dump(exclude_unset=True)
    )
    return SaleResponse.model_validate(sale)


@router.delete(
    "/{sale_id}",
    response_model=DeletedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_sale(
    db: DbSession,
    _: AdminPrincipal,
    sale_id: Annotated[UUID, Path()],
) -> DeletedResponse:
    await RecordsService(db).delete_sale(sale_id)
    return DeletedResponse(id=sale_id)
