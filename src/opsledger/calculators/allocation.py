"""Savings and profit allocation arithmetic."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class AllocationLine:
    """One earmarked slice of profit."""

    category: str
    amount: Decimal
    description: str | None = None

    def to_json(self) -> dict[str, Any]:
        """JSON-safe form stored on ProfitAllocation.allocations."""
        return {
            "category": self.category,
            "amount": str(self.amount),
            "description": self.description,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> AllocationLine:
        return cls(
            category=data["category"],
            amount=Decimal(str(data["amount"])),
            description=data.get("description"),
        )


def compute_savings_amount(total: Decimal, percentage: Decimal) -> Decimal:
    """Amount reserved: total x percentage / 100."""
    return total * percentage / Decimal("100")


def total_allocated(allocations: Iterable[AllocationLine]) -> Decimal:
    return sum((line.amount for line in allocations), Decimal("0"))


def compute_remaining_amount(
    total_profit: Decimal,
    savings: Decimal,
    allocations: Iterable[AllocationLine],
) -> Decimal:
    """Profit left after savings and every allocation line."""
    return total_profit - savings - total_allocated(allocations)
