"""API routes."""

from opsledger.api.routes.analytics import router as analytics_router
from opsledger.api.routes.attendance import router as attendance_router
from opsledger.api.routes.expenses import router as expenses_router
from opsledger.api.routes.health import router as health_router
from opsledger.api.routes.payroll import router as payroll_router
from opsledger.api.routes.sales import router as sales_router
from opsledger.api.routes.savings import router as savings_router

__all__ = [
    "analytics_router",
    "attendance_router",
    "expenses_router",
    "health_router",
    "payroll_router",
    "sales_router",
    "savings_router",
]
