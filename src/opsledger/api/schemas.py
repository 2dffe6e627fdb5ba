"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from opsledger.models.employee import CompensationModel
from opsledger.services.attendance_service import AttendanceAction
from opsledger.services.state_machine import PayrollStatus


# ============================================================================
# Common
# ============================================================================


class ErrorResponse(BaseModel):
    """Error body returned for every handled failure."""

    detail: str
    code: str


class DeletedResponse(BaseModel):
    """Acknowledgement of a hard delete."""

    deleted: bool = True
    id: UUID


# ============================================================================
# Attendance schemas
# ============================================================================


class AttendanceActionRequest(BaseModel):
    """Schema for recording an attendance action.

    ``employee_id`` is only honoured for admins; workers always act on
    themselves.
    """

    action: AttendanceAction
    employee_id: UUID | None = None
    day: date | None = None


class AttendanceResponse(BaseModel):
    """Schema for an attendance record."""

    model_config = ConfigDict(from_attributes=True)

    attendance_id: UUID
    employee_id: UUID
    day: date
    check_in_time: datetime | None = None
    check_out_time: datetime | None = None
    status: str
    working_hours: float
    is_checked_out: bool
    employee_name: str | None = None


class AttendanceListResponse(BaseModel):
    items: list[AttendanceResponse]
    total: int


# ============================================================================
# Payroll settings schemas
# ============================================================================


class PayrollSettingsUpdate(BaseModel):
    """Schema for replacing the payroll defaults."""

    default_payroll_model: CompensationModel
    default_working_days: int = Field(ge=0)
    default_daily_rate: Decimal = Field(ge=0)


class PayrollSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    settings_id: UUID
    default_payroll_model: str
    default_working_days: int
    default_daily_rate: Decimal
    updated_at: datetime


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollProcessRequest(BaseModel):
    """Schema for processing one employee's payroll for a month."""

    employee_id: UUID
    days_worked: int = Field(ge=0)
    service_charge: Decimal = Field(default=Decimal("0"), ge=0)
    month: date | None = None


class PayrollBulkRequest(BaseModel):
    reference_date: date | None = None


class PayrollBulkResponse(BaseModel):
    """Number of payroll records the bulk run created."""

    created_count: int


class PayrollStatusUpdate(BaseModel):
    status: PayrollStatus


class PayrollResponse(BaseModel):
    """Schema for a payroll record."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    month: date
    base_salary: Decimal
    working_days: int
    days_worked: int
    service_charge: Decimal
    total_payable: Decimal
    status: str
    created_at: datetime
    updated_at: datetime
    employee_name: str | None = None


class PayrollListResponse(BaseModel):
    items: list[PayrollResponse]
    total: int


# ============================================================================
# Analytics schemas
# ============================================================================


class SummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_sales: Decimal
    total_expenses: Decimal
    total_payroll: Decimal
    profit: Decimal
    profit_margin: str
    present_count: int
    absent_count: int
    late_count: int


class DayAmountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: str
    amount: Decimal


class CategoryAmountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    amount: Decimal


class AnalyticsResponse(BaseModel):
    """Financial summary plus per-day and per-category series."""

    model_config = ConfigDict(from_attributes=True)

    summary: SummaryResponse
    sales_by_day: list[DayAmountResponse]
    expenses_by_category: list[CategoryAmountResponse]
    expenses_by_day: list[DayAmountResponse]


# ============================================================================
# Savings and allocation schemas
# ============================================================================


class SavingsUpsert(BaseModel):
    month: date
    total_revenue: Decimal
    savings_percentage: Decimal
    notes: str | None = None


class SavingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    savings_id: UUID
    month: date
    total_revenue: Decimal
    savings_percentage: Decimal
    savings_amount: Decimal
    notes: str | None = None
    updated_at: datetime


class AllocationLineSchema(BaseModel):
    """One earmarked slice of profit."""

    model_config = ConfigDict(from_attributes=True)

    category: str
    amount: Decimal
    description: str | None = None


class AllocationUpsert(BaseModel):
    month: date
    total_profit: Decimal
    savings_amount: Decimal
    savings_percentage: Decimal = Decimal("0")
    allocations: list[AllocationLineSchema] = Field(default_factory=list)


class AllocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    allocation_id: UUID
    month: date
    total_profit: Decimal
    savings_amount: Decimal
    savings_percentage: Decimal
    allocations: list[AllocationLineSchema]
    remaining_amount: Decimal
    updated_at: datetime


# ============================================================================
# Sales and expense schemas
# ============================================================================


class SaleCreate(BaseModel):
    amount: Decimal = Field(ge=0)
    client_name: str = Field(min_length=1)
    description: str | None = None
    date: datetime | None = None


class SaleUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    amount: Decimal | None = Field(default=None, ge=0)
    client_name: str | None = None
    description: str | None = None
    date: datetime | None = None


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sale_id: UUID
    employee_id: UUID
    date: datetime
    amount: Decimal
    client_name: str
    description: str | None = None


class ExpenseCreate(BaseModel):
    amount: Decimal = Field(ge=0)
    category: str = Field(min_length=1)
    description: str | None = None
    date: datetime | None = None


class ExpenseUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    amount: Decimal | None = Field(default=None, ge=0)
    category: str | None = None
    description: str | None = None
    date: datetime | None = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    expense_id: UUID
    employee_id: UUID
    date: datetime
    amount: Decimal
    category: str
    description: str | None = None
