"""Authenticated principal supplied by the upstream auth layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from opsledger.errors import AuthError


class Role(str, Enum):
    """Principal roles."""

    ADMIN = "admin"
    WORKER = "worker"


@dataclass(frozen=True)
class Principal:
    """The caller an operation runs on behalf of.

    Credentials are verified before the request reaches this service; the
    principal is trusted as given.
    """

    user_id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def require_admin(self) -> None:
        """Raise a 403 AuthError unless the principal is an admin."""
        if not self.is_admin:
            raise AuthError("Insufficient permissions", status_code=403)

    def scope_employee(self, requested: UUID | None) -> UUID | None:
        """Resolve which employee a read may see.

        Workers are always pinned to themselves. Admins get the requested
        employee, or ``None`` meaning everyone.
        """
        if not self.is_admin:
            return self.user_id
        return requested

    def target_employee(self, requested: UUID | None) -> UUID:
        """Resolve which employee a write acts on (self when not given)."""
        if not self.is_admin:
            return self.user_id
        return requested or self.user_id
