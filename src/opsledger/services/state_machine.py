"""Payroll record status lifecycle."""

from __future__ import annotations

from enum import Enum

from opsledger.errors import ValidationError


class PayrollStatus(str, Enum):
    """Payroll record status values."""

    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


class PayrollStatusMachine:
    """Status transitions for payroll records.

    Every status may move to every other status (including itself): a paid
    record can be set back to processed to correct a mistake. Only the target
    value is validated.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        status.value: [target.value for target in PayrollStatus] for status in PayrollStatus
    }

    @classmethod
    def parse(cls, status: str) -> PayrollStatus:
        """Parse a status value, raising ValidationError if unknown."""
        try:
            return PayrollStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in PayrollStatus)
            raise ValidationError(
                f"Invalid payroll status '{status}' (expected one of: {allowed})"
            ) from None

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        return to_status in cls.VALID_TRANSITIONS.get(from_status, [])

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> PayrollStatus:
        """Validate a transition and return the parsed target status."""
        if not cls.can_transition(from_status, to_status):
            allowed = ", ".join(cls.get_next_statuses(from_status)) or "none"
            raise ValidationError(
                f"Invalid transition from '{from_status}' to '{to_status}' "
                f"(allowed: {allowed})"
            )
        return PayrollStatus(to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
