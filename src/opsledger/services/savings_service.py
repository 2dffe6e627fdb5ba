"""Monthly savings and profit allocation snapshots."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger.calculators.allocation import (
    AllocationLine,
    compute_remaining_amount,
    compute_savings_amount,
)
from opsledger.calculators.periods import month_start
from opsledger.database import dialect_insert
from opsledger.errors import ValidationError
from opsledger.models import CompanySavings, ProfitAllocation

logger = logging.getLogger(__name__)


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if value is None]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


class SavingsService:
    """One savings snapshot and one allocation snapshot per month.

    Writes are full-replacement upserts keyed by the month: every field is
    overwritten, nothing is merged with the previous snapshot.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _upsert(self, model: type, month: date, values: dict[str, Any]) -> Any:
        insert = dialect_insert(self.session)
        stmt = (
            insert(model)
            .values(month=month, **values)
            .on_conflict_do_update(
                index_elements=["month"],
                set_={**values, "updated_at": datetime.now()},
            )
            .returning(model)
        )
        result = await self.session.scalars(
            stmt, execution_options={"populate_existing": True}
        )
        return result.one()

    async def _latest(self, model: Any, month: date | None) -> Any:
        query = select(model)
        if month is not None:
            query = query.where(model.month == month_start(month))
        result = await self.session.execute(query.order_by(model.month.desc()).limit(1))
        return result.scalar_one_or_none()

    async def upsert_savings(
        self,
        month: date | None,
        total_revenue: Decimal | None,
        savings_percentage: Decimal | None,
        notes: str | None = None,
    ) -> CompanySavings:
        """Write the month's savings: amount = revenue x percentage / 100."""
        _require(
            month=month,
            total_revenue=total_revenue,
            savings_percentage=savings_percentage,
        )
        period = month_start(month)
        amount = compute_savings_amount(total_revenue, savings_percentage)

        savings = await self._upsert(
            CompanySavings,
            period,
            {
                "total_revenue": total_revenue,
                "savings_percentage": savings_percentage,
                "savings_amount": amount,
                "notes": notes,
            },
        )
        logger.info(
            "Saved savings for %s: %s%% of %s = %s",
            f"{period:%Y-%m}",
            savings_percentage,
            total_revenue,
            amount,
        )
        return savings

    async def get_savings(self, month: date | None = None) -> CompanySavings | None:
        """Most recent savings snapshot, optionally for a given month."""
        return await self._latest(CompanySavings, month)

    async def upsert_allocation(
        self,
        month: date | None,
        total_profit: Decimal | None,
        savings_amount: Decimal | None,
        savings_percentage: Decimal | None = None,
        allocations: Sequence[AllocationLine] = (),
    ) -> ProfitAllocation:
        """Write the month's allocation.

        remaining = total_profit - savings_amount - sum(allocation amounts)
        """
        _require(month=month, total_profit=total_profit, savings_amount=savings_amount)
        period = month_start(month)
        remaining = compute_remaining_amount(total_profit, savings_amount, allocations)

        allocation = await self._upsert(
            ProfitAllocation,
            period,
            {
                "total_profit": total_profit,
                "savings_amount": savings_amount,
                "savings_percentage": savings_percentage
                if savings_percentage is not None
                else Decimal("0"),
                "allocations": [line.to_json() for line in allocations],
                "remaining_amount": remaining,
            },
        )
        logger.info(
            "Saved profit allocation for %s: %d line(s), remaining=%s",
            f"{period:%Y-%m}",
            len(allocations),
            remaining,
        )
        return allocation

    async def get_allocation(self, month: date | None = None) -> ProfitAllocation | None:
        """Most recent allocation snapshot, optionally for a given month."""
        return await self._latest(ProfitAllocation, month)
