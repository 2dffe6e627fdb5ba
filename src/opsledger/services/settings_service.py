"""Organization-wide payroll defaults."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from opsledger.errors import ValidationError
from opsledger.models import CompensationModel, PayrollSettings

logger = logging.getLogger(__name__)

BASELINE_PAYROLL_MODEL = CompensationModel.FIXED_SALARY
BASELINE_WORKING_DAYS = 20
BASELINE_DAILY_RATE = Decimal("100")


class PayrollSettingsService:
    """Reads and writes the single PayrollSettings row.

    ``ensure_defaults`` runs once at application startup; reads fall back to
    it so a database that skipped startup seeding still behaves the same.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load(self) -> PayrollSettings | None:
        result = await self.session.execute(
            select(PayrollSettings).order_by(PayrollSettings.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def ensure_defaults(self) -> PayrollSettings:
        """Seed the baseline settings row if none exists."""
        settings = await self._load()
        if settings is not None:
            return settings

        settings = PayrollSettings(
            default_payroll_model=BASELINE_PAYROLL_MODEL.value,
            default_working_days=BASELINE_WORKING_DAYS,
            default_daily_rate=BASELINE_DAILY_RATE,
        )
        self.session.add(settings)
        await self.session.flush()
        logger.info("Seeded baseline payroll settings")
        return settings

    async def get_default_settings(self) -> PayrollSettings:
        """Return the payroll settings, seeding the baseline if absent."""
        settings = await self._load()
        if settings is None:
            settings = await self.ensure_defaults()
        return settings

    async def update_settings(
        self,
        payroll_model: str,
        working_days: int,
        daily_rate: Decimal,
    ) -> PayrollSettings:
        """Replace the three settings fields."""
        try:
            model = CompensationModel(payroll_model)
        except ValueError:
            raise ValidationError(f"Unknown payroll model '{payroll_model}'") from None
        if working_days < 0:
            raise ValidationError("default_working_days must be non-negative")
        if daily_rate < 0:
            raise ValidationError("default_daily_rate must be non-negative")

        settings = await self.get_default_settings()
        settings.default_payroll_model = model.value
        settings.default_working_days = working_days
        settings.default_daily_rate = daily_rate
        await self.session.flush()
        logger.info(
            "Updated payroll settings: model=%s working_days=%s daily_rate=%s",
            model.value,
            working_days,
            daily_rate,
        )
        return settings
