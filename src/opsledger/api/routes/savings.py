"""Company savings and profit allocation API endpoints."""

from datetime import date

from fastapi import APIRouter

from opsledger.api.dependencies import AdminPrincipal, DbSession
from opsledger.api.schemas import (
    AllocationResponse,
    AllocationUpsert,
    ErrorResponse,
    SavingsResponse,
    SavingsUpsert,
)
from opsledger.calculators.allocation import AllocationLine
from opsledger.services.savings_service import SavingsService

router = APIRouter(tags=["savings"])


@router.get(
    "/savings",
    response_model=SavingsResponse | None,
    responses={403: {"model": ErrorResponse}},
)
async def get_savings(
    db: DbSession,
    _: AdminPrincipal,
    month: date | None = None,
) -> SavingsResponse | None:
    """Most recent savings snapshot, or the one for ``month``. Null if none."""
    savings = await SavingsService(db).get_savings(month)
    if savings is None:
        return None
    return SavingsResponse.model_validate(savings)


@router.post(
    "/savings",
    response_model=SavingsResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def upsert_savings(
    db: DbSession,
    _: AdminPrincipal,
    payload: SavingsUpsert,
) -> SavingsResponse:
    """Create or replace the savings snapshot for a month."""
    savings = await SavingsService(db).upsert_savings(
        payload.month,
        payload.total_revenue,
        payload.savings_percentage,
        notes=payload.notes,
    )
    return SavingsResponse.model_validate(savings)


@router.get(
    "/profit-allocation",
    response_model=AllocationResponse | None,
    responses={403: {"model": ErrorResponse}},
)
async def get_allocation(
    db: DbSession,
    _: AdminPrincipal,
    month: date | None = None,
) -> AllocationResponse | None:
    """Most recent profit allocation, or the one for ``month``. Null if none."""
    allocation = await SavingsService(db).get_allocation(month)
    if allocation is None:
        return None
    return AllocationResponse.model_validate(allocation)


@router.post(
    "/profit-allocation",
    response_model=AllocationResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def upsert_allocation(
    db: DbSession,
    _: AdminPrincipal,
    payload: AllocationUpsert,
) -> AllocationResponse:
    """Create or replace the profit allocation for a month."""
    allocation = await SavingsService(db).upsert_allocation(
        payload.month,
        payload.total_profit,
        payload.savings_amount,
        savings_percentage=payload.savings_percentage,
        allocations=[
            AllocationLine(
                category=line.category,
                amount=line.amount,
                description=line.description,
            )
            for line in payload.allocations
        ],
    )
    return AllocationResponse.model_validate(allocation)
