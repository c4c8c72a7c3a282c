"""Employee service — records, leave summary and deletion."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from hr_leave.auth.context import AuthContext
from hr_leave.auth.security import hash_password
from hr_leave.common.constants import LeaveStatus, LedgerEntryKind
from hr_leave.common.dates import local_today
from hr_leave.common.exceptions import ValidationException
from hr_leave.employees.models import Employee
from hr_leave.employees.schemas import (
    AnnualLeaveSummary,
    EmployeeCreate,
    EmployeeDeleted,
    EmployeeOut,
    EmployeeUpdate,
)
from hr_leave.leave.entitlement import calculate_annual_leave
from hr_leave.leave.repository import LeaveRepository
from hr_leave.leave.schemas import LedgerEntryOut, SeniorityOut
from hr_leave.leave.seniority import calculate_seniority
from hr_leave.leave.usage import ledger_used_days, used_annual_leave_days

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = ("gender", "job_title")


class EmployeeService:
    """Employee records and the per-employee annual-leave view."""

    def __init__(self, repo: LeaveRepository) -> None:
        self.repo = repo

    # ── Create ──────────────────────────────────────────────────────

    async def create_employee(
        self,
        actor: AuthContext,
        data: EmployeeCreate,
        *,
        today: Optional[date] = None,
    ) -> EmployeeOut:
        """Create an employee with the entitlement their tenure already earns.

        The initial grant is recorded against the hire date, so the periodic
        grant picks the employee up again at the next anniversary.
        """
        actor.require("profile:create")
        today = today or local_today()

        details = calculate_seniority(data.hire_date, data.seniority_correction_days, today)
        initial = calculate_annual_leave(
            details.seniority_in_years,
            details.seniority_in_days_after_correction,
        )

        employee = Employee(
            **data.model_dump(exclude={"password"}),
            password_hash=hash_password(data.password),
            remaining_annual_leave_days=Decimal(initial),
            last_annual_leave_grant_date=data.hire_date,
        )
        employee = await self.repo.add_employee(employee)

        if initial:
            await self.repo.add_ledger_entry(
                employee_id=employee.id,
                kind=LedgerEntryKind.grant,
                amount=Decimal(initial),
                balance_after=Decimal(initial),
                actor_id=actor.actor_id,
                note="Initial entitlement",
            )
        logger.info("Employee %s created with %d day(s) of annual leave", employee.id, initial)
        return EmployeeOut.model_validate(employee)

    async def update_employee(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
        data: EmployeeUpdate,
    ) -> EmployeeOut:
        """Edit profile fields. Tenure changes apply from the next grant onwards."""
        actor.require("profile:update")
        fields = data.model_dump(exclude_unset=True)
        nulls = [key for key, value in fields.items() if value is None and key not in _NULLABLE_FIELDS]
        if nulls:
            raise ValidationException({key: ["Field cannot be null."] for key in nulls})
        employee = await self.repo.update_employee(employee_id, **fields)
        return EmployeeOut.model_validate(employee)

    # ── Read ────────────────────────────────────────────────────────

    async def list_employees(self, actor: AuthContext) -> list[EmployeeOut]:
        actor.require("profile:read_all")
        employees = await self.repo.list_employees()
        return [EmployeeOut.model_validate(emp) for emp in employees]

    async def get_summary(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
        *,
        today: Optional[date] = None,
    ) -> AnnualLeaveSummary:
        """Seniority, entitlement, used days (both derivations) and balance."""
        actor.require_self_or(employee_id, "profile:read_all")
        today = today or local_today()

        employee = await self.repo.get_employee(employee_id)
        requests = await self.repo.list_leave_requests(employee_id)
        entries = await self.repo.list_ledger_entries(employee_id)

        details = calculate_seniority(
            employee.hire_date, employee.seniority_correction_days or 0, today,
        )
        approved_ids = [r.id for r in requests if r.status == LeaveStatus.approved]

        return AnnualLeaveSummary(
            employee=EmployeeOut.model_validate(employee),
            reference_date=today,
            seniority=SeniorityOut.model_validate(details),
            annual_leave_entitlement=calculate_annual_leave(
                details.seniority_in_years,
                details.seniority_in_days_after_correction,
            ),
            used_annual_leave_days=used_annual_leave_days(
                details.current_cycle_start_date, requests,
            ),
            ledger_used_annual_leave_days=ledger_used_days(entries, approved_ids),
            remaining_annual_leave_days=employee.remaining_annual_leave_days,
        )

    async def list_ledger(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
    ) -> list[LedgerEntryOut]:
        actor.require_self_or(employee_id, "profile:read_all")
        await self.repo.get_employee(employee_id)
        entries = await self.repo.list_ledger_entries(employee_id)
        return [LedgerEntryOut.model_validate(e) for e in entries]

    # ── Delete ──────────────────────────────────────────────────────

    async def delete_employee(
        self,
        actor: AuthContext,
        employee_id: uuid.UUID,
    ) -> EmployeeDeleted:
        """Delete an employee together with their leave requests."""
        actor.require("profile:delete")
        await self.repo.get_employee(employee_id)

        removed = await self.repo.delete_leave_requests_for(employee_id)
        await self.repo.delete_employee(employee_id)
        logger.info("Employee %s deleted with %d leave request(s)", employee_id, removed)
        return EmployeeDeleted(id=employee_id, deleted_leave_requests=removed)
