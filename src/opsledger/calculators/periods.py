"""Calendar period helpers shared by payroll, analytics and savings."""

from __future__ import annotations

from datetime import date, datetime, time


def month_start(value: date | datetime) -> date:
    """First day of the month containing ``value``."""
    if isinstance(value, datetime):
        value = value.date()
    return value.replace(day=1)


def next_month_start(value: date | datetime) -> date:
    """First day of the month after the one containing ``value``."""
    start = month_start(value)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Inclusive [00:00:00, 23:59:59.999999] window of a calendar day."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)
