"""Auth service — username/password login, password change and admin reset."""

from __future__ import annotations

import logging
import uuid

from hr_leave.auth.context import AuthContext
from hr_leave.auth.schemas import ChangePasswordRequest, PasswordChanged, TokenResponse
from hr_leave.auth.security import create_access_token, hash_password, verify_password
from hr_leave.common.exceptions import UnauthorizedException, ValidationException
from hr_leave.config import settings
from hr_leave.leave.repository import LeaveRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Credential checks against the stored password hash."""

    def __init__(self, repo: LeaveRepository) -> None:
        self.repo = repo

    async def login(self, username: str, password: str) -> TokenResponse:
        """Issue an access token for a valid username / password pair.

        Unknown usernames, wrong passwords and accounts without a password
        all fail with the same 401.
        """
        employee = await self.repo.get_employee_by_username(username)
        if employee is None or not employee.password_hash:
            logger.info("Login refused for unknown or password-less user %r", username)
            raise UnauthorizedException()

        matches, upgraded = verify_password(password, employee.password_hash)
        if not matches:
            logger.info("Login refused for %s: wrong password", employee.id)
            raise UnauthorizedException()
        if upgraded:
            await self.repo.update_employee(employee.id, password_hash=upgraded)

        token, expires_in = create_access_token(employee.id, employee.role)
        return TokenResponse(
            access_token=token,
            expires_in=expires_in,
            employee_id=employee.id,
            role=employee.role,
        )

    async def change_password(
        self,
        actor: AuthContext,
        data: ChangePasswordRequest,
    ) -> PasswordChanged:
        actor.require("profile:change_password")
        employee = await self.repo.get_employee(actor.actor_id)

        matches = False
        if employee.password_hash:
            matches, _ = verify_password(data.current_password, employee.password_hash)
        if not matches:
            raise ValidationException({"current_password": ["Current password is incorrect."]})

        await self.repo.update_employee(employee.id, password_hash=hash_password(data.new_password))
        logger.info("Employee %s changed their password", employee.id)
        return PasswordChanged(id=employee.id, message="Password updated.")

    async def reset_password(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
    ) -> PasswordChanged:
        """Reset an employee's password to the configured default."""
        actor.require("profile:reset_password")
        await self.repo.update_employee(
            employee_id, password_hash=hash_password(settings.DEFAULT_RESET_PASSWORD),
        )
        logger.info("Password of employee %s reset by %s", employee_id, actor.actor_id)
        return PasswordChanged(id=employee_id, message="Password reset to the default.")
