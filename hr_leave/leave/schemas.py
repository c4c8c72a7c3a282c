"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update / *Request  → request bodies (write)
  - *Out / *Result / *Report      → response bodies (read)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    model_validator,
)

from hr_leave.common.constants import (
    TIME_FORMAT,
    DurationUnit,
    LeaveKind,
    LeaveStatus,
    LedgerEntryKind,
)


# ═════════════════════════════════════════════════════════════════════
# Leave Request — Create / Update
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestUpdate(BaseModel):
    """Payload for editing a pending leave request."""

    leave_type: LeaveKind
    other_leave_type: Optional[str] = Field(
        None, max_length=50, description="Label, required when leave_type is 'other'"
    )
    is_hourly: bool = False
    start_date: date = Field(..., description="Leave start date (inclusive)")
    end_date: date = Field(..., description="Leave end date (inclusive)")
    start_time: Optional[time] = Field(None, description="HH:MM, hourly leave only")
    end_time: Optional[time] = Field(None, description="HH:MM, hourly leave only")
    duration: Decimal = Field(..., gt=0, max_digits=8, decimal_places=3)
    reason: str = Field(..., min_length=1, max_length=100)
    remarks: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def validate_request(self):
        if self.leave_type == LeaveKind.other:
            if not self.other_leave_type or not self.other_leave_type.strip():
                raise ValueError("other_leave_type is required when leave_type is 'other'.")
            self.other_leave_type = self.other_leave_type.strip()
        else:
            self.other_leave_type = None

        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date.")

        if self.is_hourly:
            if self.start_time is None or self.end_time is None:
                raise ValueError("start_time and end_time are required for hourly leave.")
            if self.start_date == self.end_date and self.end_time < self.start_time:
                raise ValueError("end_time must not be earlier than start_time.")
        else:
            self.start_time = None
            self.end_time = None
        return self

    @property
    def duration_unit(self) -> DurationUnit:
        return DurationUnit.hour if self.is_hourly else DurationUnit.day


class LeaveRequestCreate(LeaveRequestUpdate):
    """Payload for filing a leave request (admins may file for others)."""

    employee_id: Optional[uuid.UUID] = Field(
        None, description="Target employee; defaults to the caller"
    )


# ═════════════════════════════════════════════════════════════════════
# Leave Request — Response
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestOut(BaseModel):
    """Full leave request response."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    submitted_by: uuid.UUID
    leave_type: LeaveKind
    other_leave_type: Optional[str] = None
    leave_type_name: str
    is_hourly: bool = False
    start_date: date
    end_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    duration: Decimal
    duration_unit: DurationUnit
    reason: str
    remarks: Optional[str] = None
    status: LeaveStatus
    deducted_from_annual_leave: Optional[bool] = None
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("start_time", "end_time")
    def _format_time(self, value: Optional[time]) -> Optional[str]:
        return value.strftime(TIME_FORMAT) if value else None


# ═════════════════════════════════════════════════════════════════════
# Ledger operation results
# ═════════════════════════════════════════════════════════════════════


class ApprovalResult(BaseModel):
    """Outcome of approving a request, including any ledger deduction."""

    request: LeaveRequestOut
    deducted: bool = False
    deducted_days: Decimal = Decimal("0")
    remaining_annual_leave_days: Optional[Decimal] = None
    message: Optional[str] = None


class DeletionResult(BaseModel):
    """Outcome of deleting a request, including any credit-back."""

    request_id: uuid.UUID
    credited_days: Decimal = Decimal("0")
    remaining_annual_leave_days: Optional[Decimal] = None


class GrantedEmployee(BaseModel):
    """One employee touched by the periodic grant."""

    id: uuid.UUID
    granted_days: int
    remaining_before: Decimal
    remaining_after: Decimal
    last_annual_leave_grant_date: date


class GrantReport(BaseModel):
    """Audit report returned by the periodic grant batch."""

    processed: int
    updated: list[GrantedEmployee]
    message: str


class BalanceAdjustRequest(BaseModel):
    """Admin manual balance adjustment payload."""

    amount: Decimal = Field(
        ..., max_digits=8, decimal_places=3, description="Positive to credit, negative to debit"
    )
    note: Optional[str] = Field(None, max_length=200)


class BalanceOut(BaseModel):
    employee_id: uuid.UUID
    remaining_annual_leave_days: Decimal


class LedgerEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    kind: LedgerEntryKind
    amount: Decimal
    balance_after: Decimal
    leave_request_id: Optional[uuid.UUID] = None
    actor_id: Optional[uuid.UUID] = None
    note: Optional[str] = None
    created_at: datetime


# ═════════════════════════════════════════════════════════════════════
# Seniority / entitlement
# ═════════════════════════════════════════════════════════════════════


class SeniorityOut(BaseModel):
    """Tenure metrics as of a reference date."""

    model_config = ConfigDict(from_attributes=True)

    seniority_in_years: int
    seniority_in_years_decimal: float
    seniority_in_days_before_correction: int
    seniority_in_days_after_correction: int
    days_until_next_seniority_cycle: int
    current_seniority_cycle: str
    current_cycle_start_date: date


class SeniorityPreviewOut(BaseModel):
    reference_date: date
    seniority: SeniorityOut
    annual_leave_entitlement: int


class EntitlementRuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    days: str
