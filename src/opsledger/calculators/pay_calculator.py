"""Monthly pay calculation for the two compensation models."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from opsledger.models.employee import CompensationModel

ZERO = Decimal("0")

# Manual single-employee runs always record 20 working days, whatever the
# configured default is. Bulk runs use the configured default.
SINGLE_RUN_WORKING_DAYS = 20


@dataclass(frozen=True)
class PayComputation:
    """Result of a pay calculation, before persistence."""

    compensation_model: CompensationModel
    base_salary: Decimal
    earned: Decimal
    service_charge: Decimal
    total_payable: Decimal


def resolve_compensation_model(
    employee_model: str | None,
    default_model: str,
) -> CompensationModel:
    """Employee's own model, falling back to the organization default."""
    return CompensationModel(employee_model or default_model)


def compute_pay(
    model: CompensationModel,
    *,
    days_worked: int,
    fixed_salary: Decimal | None,
    daily_rate: Decimal | None,
    default_daily_rate: Decimal,
    service_charge: Decimal = ZERO,
) -> PayComputation:
    """Compute base salary and total payable.

    daily_rate:   base = employee rate (or the default rate), earned = base x days
    fixed_salary: base = fixed salary (or 0), earned = base
    total_payable = earned + service_charge
    """
    if model == CompensationModel.DAILY_RATE:
        base_salary = daily_rate if daily_rate is not None else default_daily_rate
        earned = base_salary * days_worked
    else:
        base_salary = fixed_salary if fixed_salary is not None else ZERO
        earned = base_salary

    return PayComputation(
        compensation_model=model,
        base_salary=base_salary,
        earned=earned,
        service_charge=service_charge,
        total_payable=earned + service_charge,
    )
