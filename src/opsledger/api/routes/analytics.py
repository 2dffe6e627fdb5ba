"""Financial analytics API endpoint."""

from datetime import date

from fastapi import APIRouter

from opsledger.api.dependencies import AdminPrincipal, DbSession
from opsledger.api.schemas import AnalyticsResponse, ErrorResponse
from opsledger.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get(
    "",
    response_model=AnalyticsResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def summarize_analytics(
    db: DbSession,
    _: AdminPrincipal,
    start_date: date | None = None,
    end_date: date | None = None,
) -> AnalyticsResponse:
    """Sales, expenses, payroll and profit for an optional inclusive date range.

    Attendance counts always describe today.
    """
    report = await AnalyticsService(db).summarize(start_date, end_date)
    return AnalyticsResponse.model_validate(report)
