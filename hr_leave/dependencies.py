"""Shared FastAPI dependencies — one repository per request session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_leave.auth.service import AuthService
from hr_leave.database import get_db
from hr_leave.employees.service import EmployeeService
from hr_leave.leave.ledger import BalanceLedger
from hr_leave.leave.repository import LeaveRepository
from hr_leave.leave.service import LeaveService


async def get_repository(db: AsyncSession = Depends(get_db)) -> LeaveRepository:
    return LeaveRepository(db)


async def get_ledger(repo: LeaveRepository = Depends(get_repository)) -> BalanceLedger:
    return BalanceLedger(repo)


async def get_leave_service(repo: LeaveRepository = Depends(get_repository)) -> LeaveService:
    return LeaveService(repo)


async def get_employee_service(
    repo: LeaveRepository = Depends(get_repository),
) -> EmployeeService:
    return EmployeeService(repo)


async def get_auth_service(repo: LeaveRepository = Depends(get_repository)) -> AuthService:
    return AuthService(repo)
