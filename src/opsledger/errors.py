"""Error taxonomy shared by services and the HTTP adapter.

Services raise these; the FastAPI app turns them into ``{"detail", "code"}``
responses with the matching status code.
"""

from __future__ import annotations

from typing import Any


class OpsLedgerError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "ERROR"

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context = context
        super().__init__(message)


class ValidationError(OpsLedgerError):
    """Missing or malformed required input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(OpsLedgerError):
    """A referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", entity=entity, entity_id=str(entity_id))


class ConflictError(OpsLedgerError):
    """A uniqueness rule would be violated."""

    status_code = 409
    code = "CONFLICT"


class AuthError(OpsLedgerError):
    """Missing principal (401) or insufficient role (403)."""

    code = "AUTH_ERROR"

    def __init__(self, message: str, status_code: int = 401):
        self.status_code = status_code
        super().__init__(message)


class OperationalError(OpsLedgerError):
    """Storage or transport failure. Details stay in the logs."""

    status_code = 500
    code = "INTERNAL_ERROR"
