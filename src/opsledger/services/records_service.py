"""Sales and expense records."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger.auth import Principal
from opsledger.errors import NotFoundError, ValidationError
from opsledger.models import Employee, ExpenseRecord, SalesRecord
from opsledger.services.queries import ExpenseQuery, SalesQuery

logger = logging.getLogger(__name__)


def _check_amount(amount: Decimal | None) -> None:
    if amount is None:
        raise ValidationError("Missing required fields: amount")
    if amount < 0:
        raise ValidationError("amount must be non-negative")


class RecordsService:
    """Create, list, update and delete sales and expense records.

    New records are attributed to the principal that records them.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.clock = clock

    # ===== Sales =====

    async def create_sale(
        self,
        principal: Principal,
        amount: Decimal | None,
        client_name: str | None,
        description: str | None = None,
        date: datetime | None = None,
    ) -> SalesRecord:
        _check_amount(amount)
        if not client_name:
            raise ValidationError("Missing required fields: client_name")
        await self._require_employee(principal.user_id)

        sale = SalesRecord(
            employee_id=principal.user_id,
            date=date or self.clock(),
            amount=amount,
            client_name=client_name,
            description=description,
        )
        self.session.add(sale)
        await self.session.flush()
        logger.info("Recorded sale %s: %s from %s", sale.sale_id, amount, client_name)
        return sale

    async def list_sales(self, query: SalesQuery | None = None) -> list[SalesRecord]:
        """Sales newest first."""
        query = query or SalesQuery()
        result = await self.session.execute(
            select(SalesRecord).where(*query.clauses()).order_by(SalesRecord.date.desc())
        )
        return list(result.scalars().all())

    async def update_sale(self, sale_id: UUID, **changes: Any) -> SalesRecord:
        """Apply the given non-None field changes to a sale."""
        sale = await self.session.get(SalesRecord, sale_id)
        if sale is None:
            raise NotFoundError("Sale", sale_id)
        self._apply(sale, changes, ("date", "amount", "client_name", "description"))
        await self.session.flush()
        logger.info("Updated sale %s", sale_id)
        return sale

    async def delete_sale(self, sale_id: UUID) -> None:
        sale = await self.session.get(SalesRecord, sale_id)
        if sale is None:
            raise NotFoundError("Sale", sale_id)
        await self.session.delete(sale)
        await self.session.flush()
        logger.info("Deleted sale %s", sale_id)

    # ===== Expenses =====

    async def create_expense(
        self,
        principal: Principal,
        amount: Decimal | None,
        category: str | None,
        description: str | None = None,
        date: datetime | None = None,
    ) -> ExpenseRecord:
        _check_amount(amount)
        if not category:
            raise ValidationError("Missing required fields: category")
        await self._require_employee(principal.user_id)

        expense = ExpenseRecord(
            employee_id=principal.user_id,
            date=date or self.clock(),
            amount=amount,
            category=category,
            description=description,
        )
        self.session.add(expense)
        await self.session.flush()
        logger.info("Recorded expense %s: %s (%s)", expense.expense_id, amount, category)
        return expense

    async def list_expenses(self, query: ExpenseQuery | None = None) -> list[ExpenseRecord]:
        """Expenses newest first."""
        query = query or ExpenseQuery()
        result = await self.session.execute(
            select(ExpenseRecord)
            .where(*query.clauses())
            .order_by(ExpenseRecord.date.desc())
        )
        return list(result.scalars().all())

    async def update_expense(self, expense_id: UUID, **changes: Any) -> ExpenseRecord:
        """Apply the given non-None field changes to an expense."""
        expense = await self.session.get(ExpenseRecord, expense_id)
        if expense is None:
            raise NotFoundError("Expense", expense_id)
        self._apply(expense, changes, ("date", "amount", "category", "description"))
        await self.session.flush()
        logger.info("Updated expense %s", expense_id)
        return expense

    async def delete_expense(self, expense_id: UUID) -> None:
        expense = await self.session.get(ExpenseRecord, expense_id)
        if expense is None:
            raise NotFoundError("Expense", expense_id)
        await self.session.delete(expense)
        await self.session.flush()
        logger.info("Deleted expense %s", expense_id)

    # ===== Helpers =====

    async def _require_employee(self, employee_id: UUID) -> None:
        if await self.session.get(Employee, employee_id) is None:
            raise NotFoundError("Employee", employee_id)

    @staticmethod
    def _apply(record: Any, changes: dict[str, Any], allowed: tuple[str, ...]) -> None:
        unknown = set(changes) - set(allowed)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        if changes.get("amount") is not None:
            _check_amount(changes["amount"])
        for name, value in changes.items():
            if value is not None:
                setattr(record, name, value)
