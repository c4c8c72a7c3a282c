"""Balance ledger — the only code that changes an employee's annual-leave balance.

Operations:
  - Periodic grant: credit each employee's entitlement once per accrual cycle
  - Approve: deduct the day-equivalent of an annual request (unless it
    predates the current cycle), then mark it approved
  - Reject: mark a pending request rejected, no balance effect
  - Delete: credit back a deducted annual request, then remove it
  - Manual adjustment: add a signed amount, no bounds

Every operation takes an explicit ``AuthContext`` and checks capabilities
itself. A persistence failure aborts the operation at that step; nothing
is retried.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from hr_leave.auth.context import AuthContext
from hr_leave.common.constants import LeaveKind, LeaveStatus, LedgerEntryKind
from hr_leave.common.dates import local_today
from hr_leave.common.exceptions import (
    InvalidStateException,
    ValidationException,
)
from hr_leave.leave.entitlement import calculate_annual_leave
from hr_leave.leave.models import LeaveRequest
from hr_leave.leave.repository import LeaveRepository
from hr_leave.leave.schemas import (
    ApprovalResult,
    BalanceOut,
    DeletionResult,
    GrantedEmployee,
    GrantReport,
    LeaveRequestOut,
)
from hr_leave.leave.seniority import calculate_seniority
from hr_leave.leave.usage import to_day_equivalent

logger = logging.getLogger(__name__)

PREDATES_CYCLE_MESSAGE = (
    "Leave starts before the current seniority cycle; "
    "it was not deducted from the annual-leave balance."
)


class BalanceLedger:
    """Grant / deduct / credit-back / adjust operations over a repository."""

    def __init__(self, repo: LeaveRepository) -> None:
        self.repo = repo

    # ─────────────────────────────────────────────────────────────────
    # Periodic grant
    # ─────────────────────────────────────────────────────────────────

    async def grant_annual_leave(
        self,
        actor: AuthContext,
        *,
        today: Optional[date] = None,
    ) -> GrantReport:
        """Credit this cycle's entitlement to every employee not yet granted it."""
        actor.require("leave:grant")
        today = today or local_today()

        employees = await self.repo.list_employees()
        updates: list[dict] = []
        granted: list[GrantedEmployee] = []

        for emp in employees:
            details = calculate_seniority(
                emp.hire_date, emp.seniority_correction_days or 0, today,
            )
            cycle_start = details.current_cycle_start_date
            last_grant = emp.last_annual_leave_grant_date

            if cycle_start > today:
                continue
            if last_grant is not None and last_grant >= cycle_start:
                continue

            entitlement = calculate_annual_leave(
                details.seniority_in_years,
                details.seniority_in_days_after_correction,
            )
            before = emp.remaining_annual_leave_days or Decimal("0")
            after = before + entitlement

            updates.append({
                "id": emp.id,
                "remaining_annual_leave_days": after,
                "last_annual_leave_grant_date": today,
            })
            granted.append(GrantedEmployee(
                id=emp.id,
                granted_days=entitlement,
                remaining_before=before,
                remaining_after=after,
                last_annual_leave_grant_date=today,
            ))

        if updates:
            await self.repo.upsert_employees(updates)
            for row in granted:
                await self.repo.add_ledger_entry(
                    employee_id=row.id,
                    kind=LedgerEntryKind.grant,
                    amount=Decimal(row.granted_days),
                    balance_after=row.remaining_after,
                    actor_id=actor.actor_id,
                    note=f"Cycle grant on {today.isoformat()}",
                )

        logger.info(
            "Annual-leave grant by %s: processed %d employees, updated %d",
            actor.actor_id, len(employees), len(granted),
        )
        return GrantReport(
            processed=len(employees),
            updated=granted,
            message=f"Processed {len(employees)} employees, updated {len(granted)} records.",
        )

    # ─────────────────────────────────────────────────────────────────
    # Approve / reject
    # ─────────────────────────────────────────────────────────────────

    async def approve_request(
        self,
        actor: AuthContext,
        request_id: uuid.UUID,
        *,
        today: Optional[date] = None,
    ) -> ApprovalResult:
        """Approve a pending request, deducting annual leave when it applies."""
        actor.require("leave:approve")

        leave_req = await self.repo.get_leave_request(request_id)
        self._require_pending(leave_req)

        deducted = False
        deducted_days = Decimal("0")
        remaining: Optional[Decimal] = None
        message: Optional[str] = None

        if leave_req.leave_type == LeaveKind.annual:
            employee = await self.repo.get_employee(leave_req.employee_id)
            details = calculate_seniority(
                employee.hire_date,
                employee.seniority_correction_days or 0,
                today or local_today(),
            )
            if leave_req.start_date < details.current_cycle_start_date:
                message = PREDATES_CYCLE_MESSAGE
                remaining = employee.remaining_annual_leave_days
                logger.info(
                    "Request %s predates cycle start %s; no deduction",
                    leave_req.id, details.current_cycle_start_date,
                )
            else:
                deducted_days = to_day_equivalent(leave_req.duration, leave_req.duration_unit)
                remaining = await self.repo.adjust_remaining(employee.id, -deducted_days)
                await self.repo.add_ledger_entry(
                    employee_id=employee.id,
                    kind=LedgerEntryKind.deduct,
                    amount=-deducted_days,
                    balance_after=remaining,
                    actor_id=actor.actor_id,
                    leave_request_id=leave_req.id,
                )
                deducted = True
                logger.info(
                    "Deducted %s day(s) from %s for request %s; remaining %s",
                    deducted_days, employee.id, leave_req.id, remaining,
                )

        leave_req = await self.repo.update_leave_request(
            leave_req.id,
            status=LeaveStatus.approved,
            deducted_from_annual_leave=deducted,
            reviewed_by=actor.actor_id,
            reviewed_at=datetime.now(timezone.utc),
        )

        return ApprovalResult(
            request=LeaveRequestOut.model_validate(leave_req),
            deducted=deducted,
            deducted_days=deducted_days,
            remaining_annual_leave_days=remaining,
            message=message,
        )

    async def reject_request(
        self,
        actor: AuthContext,
        request_id: uuid.UUID,
    ) -> LeaveRequestOut:
        """Reject a pending request. No balance effect."""
        actor.require("leave:reject")

        leave_req = await self.repo.get_leave_request(request_id)
        self._require_pending(leave_req)

        leave_req = await self.repo.update_leave_request(
            leave_req.id,
            status=LeaveStatus.rejected,
            reviewed_by=actor.actor_id,
            reviewed_at=datetime.now(timezone.utc),
        )
        logger.info("Request %s rejected by %s", leave_req.id, actor.actor_id)
        return LeaveRequestOut.model_validate(leave_req)

    # ─────────────────────────────────────────────────────────────────
    # Delete
    # ─────────────────────────────────────────────────────────────────

    async def delete_request(
        self,
        actor: AuthContext,
        request_id: uuid.UUID,
    ) -> DeletionResult:
        """Delete a request in any status, crediting back a prior deduction."""
        leave_req = await self.repo.get_leave_request(request_id)
        if actor.actor_id not in (leave_req.employee_id, leave_req.submitted_by):
            actor.require("leave:delete_any")
        else:
            actor.require("leave:delete_own")

        credited = Decimal("0")
        remaining: Optional[Decimal] = None

        # NULL (legacy) counts as deducted; only an explicit False is skipped
        if (
            leave_req.status == LeaveStatus.approved
            and leave_req.leave_type == LeaveKind.annual
            and leave_req.deducted_from_annual_leave is not False
        ):
            credited = to_day_equivalent(leave_req.duration, leave_req.duration_unit)
            remaining = await self.repo.adjust_remaining(leave_req.employee_id, credited)
            await self.repo.add_ledger_entry(
                employee_id=leave_req.employee_id,
                kind=LedgerEntryKind.credit,
                amount=credited,
                balance_after=remaining,
                actor_id=actor.actor_id,
                leave_request_id=leave_req.id,
            )
            logger.info(
                "Credited back %s day(s) to %s for deleted request %s; remaining %s",
                credited, leave_req.employee_id, leave_req.id, remaining,
            )

        await self.repo.delete_leave_request(leave_req.id)
        return DeletionResult(
            request_id=request_id,
            credited_days=credited,
            remaining_annual_leave_days=remaining,
        )

    # ─────────────────────────────────────────────────────────────────
    # Manual adjustment
    # ─────────────────────────────────────────────────────────────────

    async def adjust_balance(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
        amount: Decimal,
        *,
        note: Optional[str] = None,
    ) -> BalanceOut:
        """Add a signed amount to the balance. No floor, no ceiling."""
        actor.require("leave:adjust")
        amount = Decimal(amount)
        if not amount.is_finite():
            raise ValidationException({"amount": ["Adjustment must be a finite number."]})

        remaining = await self.repo.adjust_remaining(employee_id, amount)
        await self.repo.add_ledger_entry(
            employee_id=employee_id,
            kind=LedgerEntryKind.adjust,
            amount=amount,
            balance_after=remaining,
            actor_id=actor.actor_id,
            note=note,
        )
        logger.info(
            "Manual adjustment of %s day(s) for %s by %s; remaining %s",
            amount, employee_id, actor.actor_id, remaining,
        )
        return BalanceOut(employee_id=employee_id, remaining_annual_leave_days=remaining)

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def _require_pending(leave_req: LeaveRequest) -> None:
        if leave_req.status != LeaveStatus.pending:
            raise InvalidStateException(
                "LeaveRequest", leave_req.status.value, LeaveStatus.pending.value,
            )
