"""Auth router — login and self-service password change."""

from fastapi import APIRouter, Depends, Request

from hr_leave.auth.context import AuthContext
from hr_leave.auth.dependencies import get_current_user
from hr_leave.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordChanged,
    TokenResponse,
)
from hr_leave.auth.service import AuthService
from hr_leave.common.rate_limit import limiter
from hr_leave.config import settings
from hr_leave.dependencies import get_auth_service

router = APIRouter(prefix="", tags=["auth"])


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(body.username, body.password)


# ── POST /change-password ───────────────────────────────────────────

@router.post("/change-password", response_model=PasswordChanged)
async def change_password(
    body: ChangePasswordRequest,
    actor: AuthContext = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Replace the caller's password after checking the current one."""
    return await service.change_password(actor, body)
