"""Expense record API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from opsledger.api.dependencies import AdminPrincipal, DbSession
from opsledger.api.schemas import (
    DeletedResponse,
    ErrorResponse,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
)
from opsledger.services.queries import DateRange, ExpenseQuery
from opsledger.services.records_service import RecordsService

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=list[ExpenseResponse])
async def list_expenses(
    db: DbSession,
    _: AdminPrincipal,
    start_date: date | None = None,
    end_date: date | None = None,
    category: str | None = None,
) -> list[ExpenseResponse]:
    """List expenses newest first, optionally within an inclusive date range."""
    expenses = await RecordsService(db).list_expenses(
        ExpenseQuery(period=DateRange(start_date, end_date), category=category)
    )
    return [ExpenseResponse.model_validate(e) for e in expenses]


@router.post(
    "",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_expense(
    db: DbSession,
    principal: AdminPrincipal,
    payload: ExpenseCreate,
) -> ExpenseResponse:
    expense = await RecordsService(db).create_expense(
        principal,
        payload.amount,
        payload.category,
        description=payload.description,
        date=payload.date,
    )
    return ExpenseResponse.model_validate(expense)


@router.put(
    "/{expense_id}",
    response_model=ExpenseResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_expense(
    db: DbSession,
    _: AdminPrincipal,
    expense_id: Annotated[UUID, Path()],
    payload: ExpenseUpdate,
) -> ExpenseResponse:
    expense = await RecordsService(db).update_expense(
        expense_id, **payload.model_dump(exclude_unset=True)
    )
    return ExpenseResponse.model_validate(expense)


@router.delete(
    "/{expense_id}",
    response_model=DeletedResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_expense(
    db: DbSession,
    _: AdminPrincipal,
    expense_id: Annotated[UUID, Path()],
) -> DeletedResponse:
    await RecordsService(db).delete_expense(expense_id)
    return DeletedResponse(id=expense_id)
