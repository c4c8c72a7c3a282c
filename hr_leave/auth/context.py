"""Explicit authorization context threaded into every ledger operation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from hr_leave.common.constants import PERMISSIONS, UserRole
from hr_leave.common.exceptions import ForbiddenException


@dataclass(frozen=True)
class AuthContext:
    """Who is acting, and with which role."""

    actor_id: uuid.UUID
    role: UserRole = UserRole.employee

    def has_permission(self, permission: str) -> bool:
        return permission in PERMISSIONS.get(self.role, [])

    def require(self, permission: str) -> None:
        """Raise ForbiddenException unless the role grants ``permission``."""
        if not self.has_permission(permission):
            raise ForbiddenException(
                detail=f"Permission '{permission}' is not granted to role '{self.role.value}'.",
            )

    def require_self_or(self, employee_id: uuid.UUID, permission: str) -> None:
        """Allow acting on one's own records, otherwise require ``permission``."""
        if employee_id != self.actor_id:
            self.require(permission)
