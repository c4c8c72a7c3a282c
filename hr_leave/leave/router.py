"""Leave router — file, edit, review and delete requests; annual-leave grant.

All endpoints require authentication. Capability checks happen in the
service / ledger layer against the caller's ``AuthContext``.
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from hr_leave.auth.context import AuthContext
from hr_leave.auth.dependencies import get_current_user, require_role
from hr_leave.common.constants import LeaveStatus, UserRole
from hr_leave.common.rate_limit import limiter
from hr_leave.config import settings
from hr_leave.dependencies import get_ledger, get_leave_service
from hr_leave.leave.ledger import BalanceLedger
from hr_leave.leave.schemas import (
    ApprovalResult,
    DeletionResult,
    EntitlementRuleOut,
    GrantReport,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveRequestUpdate,
    SeniorityPreviewOut,
)
from hr_leave.leave.service import LeaveService

router = APIRouter(prefix="", tags=["leave"])


# ── POST /requests ──────────────────────────────────────────────────

@router.post("/requests", response_model=LeaveRequestOut, status_code=201)
async def submit_leave_request(
    body: LeaveRequestCreate,
    actor: AuthContext = Depends(get_current_user),
    service: LeaveService = Depends(get_leave_service),
):
    """File a leave request. Admins may set ``employee_id`` to file for others."""
    return await service.submit_request(actor, body)


# ── GET /requests ───────────────────────────────────────────────────

@router.get("/requests", response_model=list[LeaveRequestOut])
async def list_leave_requests(
    employee_id: Optional[uuid.UUID] = Query(None),
    status: Optional[LeaveStatus] = Query(None),
    actor: AuthContext = Depends(get_current_user),
    service: LeaveService = Depends(get_leave_service),
):
    """List requests newest-first. Omitting ``employee_id`` lists everyone (admin)."""
    return await service.list_requests(actor, employee_id=employee_id, status=status)


# ── GET /requests/{id} ──────────────────────────────────────────────

@router.get("/requests/{request_id}", response_model=LeaveRequestOut)
async def get_leave_request(
    request_id: uuid.UUID,
    actor: AuthContext = Depends(get_current_user),
    service: LeaveService = Depends(get_leave_service),
):
    return await service.get_request(actor, request_id)


# ── PUT /requests/{id} ──────────────────────────────────────────────

@router.put("/requests/{request_id}", response_model=LeaveRequestOut)
async def update_leave_request(
    request_id: uuid.UUID,
    body: LeaveRequestUpdate,
    actor: AuthContext = Depends(get_current_user),
    service: LeaveService = Depends(get_leave_service),
):
    """Edit a pending request."""
    return await service.update_request(actor, request_id, body)


# ── PUT /requests/{id}/approve ──────────────────────────────────────

@router.put("/requests/{request_id}/approve", response_model=ApprovalResult)
async def approve_leave_request(
    request_id: uuid.UUID,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    ledger: BalanceLedger = Depends(get_ledger),
):
    """Approve a pending request. Annual leave is deducted from the balance."""
    return await ledger.approve_request(actor, request_id)


# ── PUT /requests/{id}/reject ───────────────────────────────────────

@router.put("/requests/{request_id}/reject", response_model=LeaveRequestOut)
async def reject_leave_request(
    request_id: uuid.UUID,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    ledger: BalanceLedger = Depends(get_ledger),
):
    return await ledger.reject_request(actor, request_id)


# ── DELETE /requests/{id} ───────────────────────────────────────────

@router.delete("/requests/{request_id}", response_model=DeletionResult)
async def delete_leave_request(
    request_id: uuid.UUID,
    actor: AuthContext = Depends(get_current_user),
    ledger: BalanceLedger = Depends(get_ledger),
):
    """Delete a request. A deducted annual request is credited back first."""
    return await ledger.delete_request(actor, request_id)


# ── POST /grant-annual-leave ────────────────────────────────────────

@router.post("/grant-annual-leave", response_model=GrantReport)
@limiter.limit(settings.GRANT_RATE_LIMIT)
async def grant_annual_leave(
    request: Request,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    ledger: BalanceLedger = Depends(get_ledger),
):
    """Credit this cycle's entitlement to every employee not yet granted it."""
    return await ledger.grant_annual_leave(actor)


# ── GET /entitlement-rules ──────────────────────────────────────────

@router.get("/entitlement-rules", response_model=list[EntitlementRuleOut])
async def entitlement_rules(
    actor: AuthContext = Depends(get_current_user),
):
    """Statutory annual-leave table, tier by tier."""
    return LeaveService.entitlement_rules()


# ── GET /seniority-preview ──────────────────────────────────────────

@router.get("/seniority-preview", response_model=SeniorityPreviewOut)
async def seniority_preview(
    hire_date: date = Query(...),
    correction_days: int = Query(0, ge=-36500, le=36500),
    reference_date: Optional[date] = Query(None),
    actor: AuthContext = Depends(get_current_user),
):
    """Seniority and entitlement for an arbitrary hire date."""
    return LeaveService.preview_seniority(hire_date, correction_days, reference_date)
