"""Leave service layer — filing, editing and listing leave requests.

Ledger-affecting transitions (approve / reject / delete) live in
``hr_leave.leave.ledger``; this module never touches a balance.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from hr_leave.auth.context import AuthContext
from hr_leave.common.constants import LeaveStatus
from hr_leave.common.dates import local_today
from hr_leave.common.exceptions import InvalidStateException
from hr_leave.leave.entitlement import ENTITLEMENT_RULES, calculate_annual_leave
from hr_leave.leave.models import LeaveRequest
from hr_leave.leave.repository import LeaveRepository
from hr_leave.leave.schemas import (
    EntitlementRuleOut,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveRequestUpdate,
    SeniorityOut,
    SeniorityPreviewOut,
)
from hr_leave.leave.seniority import calculate_seniority

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request lifecycle up to (not including) review."""

    def __init__(self, repo: LeaveRepository) -> None:
        self.repo = repo

    # ─────────────────────────────────────────────────────────────────
    # Submit / edit
    # ─────────────────────────────────────────────────────────────────

    async def submit_request(
        self,
        actor: AuthContext,
        data: LeaveRequestCreate,
    ) -> LeaveRequestOut:
        """File a pending request for the caller, or (admins) for anyone."""
        employee_id = data.employee_id or actor.actor_id
        actor.require("leave:request")
        actor.require_self_or(employee_id, "leave:request_for_others")

        # Raises NotFoundException for an unknown target
        await self.repo.get_employee(employee_id)

        leave_req = LeaveRequest(
            employee_id=employee_id,
            submitted_by=actor.actor_id,
            leave_type=data.leave_type,
            other_leave_type=data.other_leave_type,
            is_hourly=data.is_hourly,
            start_date=data.start_date,
            end_date=data.end_date,
            start_time=data.start_time,
            end_time=data.end_time,
            duration=data.duration,
            duration_unit=data.duration_unit,
            reason=data.reason,
            remarks=data.remarks,
            status=LeaveStatus.pending,
            deducted_from_annual_leave=False,
        )
        leave_req = await self.repo.add_leave_request(leave_req)
        logger.info(
            "Leave request %s (%s, %s %s) filed for %s by %s",
            leave_req.id, leave_req.leave_type_name, data.duration,
            data.duration_unit.value, employee_id, actor.actor_id,
        )
        return LeaveRequestOut.model_validate(leave_req)

    async def update_request(
        self,
        actor: AuthContext,
        request_id: uuid.UUID,
        data: LeaveRequestUpdate,
    ) -> LeaveRequestOut:
        """Edit a request while it is still pending.

        Reviewed requests are frozen: changing dates or duration after a
        deduction would make the balance and the usage figure disagree.
        """
        leave_req = await self.repo.get_leave_request(request_id)
        if actor.actor_id not in (leave_req.employee_id, leave_req.submitted_by):
            actor.require("leave:request_for_others")
        if leave_req.status != LeaveStatus.pending:
            raise InvalidStateException(
                "LeaveRequest", leave_req.status.value, LeaveStatus.pending.value,
            )

        leave_req = await self.repo.update_leave_request(
            request_id,
            leave_type=data.leave_type,
            other_leave_type=data.other_leave_type,
            is_hourly=data.is_hourly,
            start_date=data.start_date,
            end_date=data.end_date,
            start_time=data.start_time,
            end_time=data.end_time,
            duration=data.duration,
            duration_unit=data.duration_unit,
            reason=data.reason,
            remarks=data.remarks,
        )
        return LeaveRequestOut.model_validate(leave_req)

    # ─────────────────────────────────────────────────────────────────
    # Read
    # ─────────────────────────────────────────────────────────────────

    async def get_request(
        self,
        actor: AuthContext,
        request_id: uuid.UUID,
    ) -> LeaveRequestOut:
        leave_req = await self.repo.get_leave_request(request_id)
        if actor.actor_id not in (leave_req.employee_id, leave_req.submitted_by):
            actor.require("leave:read_all")
        return LeaveRequestOut.model_validate(leave_req)

    async def list_requests(
        self,
        actor: AuthContext,
        *,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[LeaveStatus] = None,
    ) -> list[LeaveRequestOut]:
        """Requests newest-first. Without ``employee_id`` lists everyone (admin)."""
        if employee_id is None:
            actor.require("leave:read_all")
        else:
            actor.require_self_or(employee_id, "leave:read_all")
            await self.repo.get_employee(employee_id)

        requests = await self.repo.list_leave_requests(employee_id, status=status)
        return [LeaveRequestOut.model_validate(r) for r in requests]

    # ─────────────────────────────────────────────────────────────────
    # Seniority / entitlement (no persistence)
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def preview_seniority(
        hire_date: date,
        correction_days: int = 0,
        reference_date: Optional[date] = None,
    ) -> SeniorityPreviewOut:
        """Seniority and entitlement for a prospective hire date."""
        today = reference_date or local_today()
        details = calculate_seniority(hire_date, correction_days, today)
        return SeniorityPreviewOut(
            reference_date=today,
            seniority=SeniorityOut.model_validate(details),
            annual_leave_entitlement=calculate_annual_leave(
                details.seniority_in_years,
                details.seniority_in_days_after_correction,
            ),
        )

    @staticmethod
    def entitlement_rules() -> list[EntitlementRuleOut]:
        return [EntitlementRuleOut.model_validate(rule) for rule in ENTITLEMENT_RULES]
