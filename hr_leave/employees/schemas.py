"""Employee Pydantic v2 schemas — request / response validation."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hr_leave.auth.schemas import PASSWORD_MIN_LENGTH
from hr_leave.common.constants import UserRole
from hr_leave.leave.schemas import SeniorityOut


class EmployeeCreate(BaseModel):
    """Payload for creating an employee record."""

    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.\-]+$")
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)
    job_title: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.employee
    hire_date: date
    seniority_correction_days: int = Field(0, ge=-36500, le=36500)


class EmployeeUpdate(BaseModel):
    """Partial update of profile fields. The balance is never editable here."""

    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.\-]+$")
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)
    job_title: Optional[str] = Field(None, max_length=100)
    role: Optional[UserRole] = None
    hire_date: Optional[date] = None
    seniority_correction_days: Optional[int] = Field(None, ge=-36500, le=36500)


class EmployeeOut(BaseModel):
    """Full employee representation."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    name: str
    gender: Optional[str] = None
    job_title: Optional[str] = None
    role: UserRole
    hire_date: date
    seniority_correction_days: int = 0
    remaining_annual_leave_days: Decimal
    last_annual_leave_grant_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime


class AnnualLeaveSummary(BaseModel):
    """Employee detail view: tenure, entitlement and both usage figures."""

    employee: EmployeeOut
    reference_date: date
    seniority: SeniorityOut
    annual_leave_entitlement: int
    used_annual_leave_days: Decimal = Field(
        ..., description="Approved annual leave in the current cycle, from request history"
    )
    ledger_used_annual_leave_days: Decimal = Field(
        ..., description="Deductions recorded by the ledger for still-approved requests"
    )
    remaining_annual_leave_days: Decimal


class EmployeeDeleted(BaseModel):
    id: uuid.UUID
    deleted_leave_requests: int
