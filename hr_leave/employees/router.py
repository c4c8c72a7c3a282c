"""Employee router — records, summary, ledger history, balance adjustment, password reset."""

import uuid

from fastapi import APIRouter, Depends

from hr_leave.auth.context import AuthContext
from hr_leave.auth.dependencies import get_current_user, require_role
from hr_leave.auth.schemas import PasswordChanged
from hr_leave.auth.service import AuthService
from hr_leave.common.constants import UserRole
from hr_leave.dependencies import get_auth_service, get_employee_service, get_ledger
from hr_leave.employees.schemas import (
    AnnualLeaveSummary,
    EmployeeCreate,
    EmployeeDeleted,
    EmployeeOut,
    EmployeeUpdate,
)
from hr_leave.employees.service import EmployeeService
from hr_leave.leave.ledger import BalanceLedger
from hr_leave.leave.schemas import BalanceAdjustRequest, BalanceOut, LedgerEntryOut

router = APIRouter(prefix="", tags=["employees"])


@router.get("", response_model=list[EmployeeOut])
async def list_employees(
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    service: EmployeeService = Depends(get_employee_service),
):
    return await service.list_employees(actor)


@router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    service: EmployeeService = Depends(get_employee_service),
):
    """Create an employee with the entitlement their tenure already earns."""
    return await service.create_employee(actor, body)


@router.get("/{employee_id}", response_model=AnnualLeaveSummary)
async def get_employee_summary(
    employee_id: uuid.UUID,
    actor: AuthContext = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    """Employee record with seniority, entitlement, used days and balance."""
    return await service.get_summary(actor, employee_id)


@router.patch("/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    service: EmployeeService = Depends(get_employee_service),
):
    return await service.update_employee(actor, employee_id, body)


@router.delete("/{employee_id}", response_model=EmployeeDeleted)
async def delete_employee(
    employee_id: uuid.UUID,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    service: EmployeeService = Depends(get_employee_service),
):
    return await service.delete_employee(actor, employee_id)


@router.post("/{employee_id}/reset-password", response_model=PasswordChanged)
async def reset_password(
    employee_id: uuid.UUID,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    service: AuthService = Depends(get_auth_service),
):
    """Reset the employee's password to the configured default."""
    return await service.reset_password(actor, employee_id)


@router.get("/{employee_id}/ledger", response_model=list[LedgerEntryOut])
async def list_ledger_entries(
    employee_id: uuid.UUID,
    actor: AuthContext = Depends(get_current_user),
    service: EmployeeService = Depends(get_employee_service),
):
    """Every balance change for the employee, newest first."""
    return await service.list_ledger(actor, employee_id)


@router.post("/{employee_id}/annual-leave/adjust", response_model=BalanceOut)
async def adjust_annual_leave(
    employee_id: uuid.UUID,
    body: BalanceAdjustRequest,
    actor: AuthContext = Depends(require_role(UserRole.admin)),
    ledger: BalanceLedger = Depends(get_ledger),
):
    """Add (or with a negative amount, subtract) days from the balance."""
    return await ledger.adjust_balance(actor, employee_id, body.amount, note=body.note)
