"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from opsledger import __version__
from opsledger.api.routes import (
    analytics_router,
    attendance_router,
    expenses_router,
    health_router,
    payroll_router,
    sales_router,
    savings_router,
)
from opsledger.config import settings
from opsledger.database import create_schema, dispose_db, get_session, init_db
from opsledger.errors import OpsLedgerError
from opsledger.services.settings_service import PayrollSettingsService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    engine, _ = init_db()
    if settings.create_schema:
        await create_schema(engine)
    async with get_session() as session:
        await PayrollSettingsService(session).ensure_defaults()
    yield
    # Shutdown
    await dispose_db()


def _error(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="OpsLedger API",
        description="Attendance, payroll and financial aggregation",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(OpsLedgerError)
    async def domain_exception_handler(
        request: Request, exc: OpsLedgerError
    ) -> JSONResponse:
        """Map domain errors to their status code."""
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            return _error(exc.status_code, "An unexpected error occurred", exc.code)
        return _error(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed or missing request fields as 400."""
        fields = sorted(
            {".".join(str(part) for part in err["loc"][1:]) for err in exc.errors()}
            - {""}
        )
        return _error(
            status.HTTP_400_BAD_REQUEST,
            f"Invalid or missing fields: {', '.join(fields)}",
            "VALIDATION_ERROR",
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        """Storage failures are logged and reported opaquely."""
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            "INTERNAL_ERROR",
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            "INTERNAL_ERROR",
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        attendance_router,
        payroll_router,
        analytics_router,
        savings_router,
        sales_router,
        expenses_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
