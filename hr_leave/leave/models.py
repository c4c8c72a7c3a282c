"""Leave ORM models: LeaveRequest, LedgerEntry."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_leave.common.constants import (
    DurationUnit,
    LeaveKind,
    LeaveStatus,
    LedgerEntryKind,
)
from hr_leave.database import Base
from hr_leave.leave.kinds import LeaveType

if TYPE_CHECKING:
    from hr_leave.employees.models import Employee


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (
        sa.CheckConstraint("end_date >= start_date", name="ck_leave_request_dates"),
        sa.Index("ix_leave_requests_employee_start", "employee_id", "start_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False
    )
    # submitter and reviewer are plain ids so deleting either employee keeps the request
    submitted_by: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    leave_type: Mapped[LeaveKind] = mapped_column(
        sa.Enum(LeaveKind, name="leave_kind"), nullable=False
    )
    other_leave_type: Mapped[Optional[str]] = mapped_column(sa.String(50))
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    is_hourly: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    start_time: Mapped[Optional[time]] = mapped_column(sa.Time)
    end_time: Mapped[Optional[time]] = mapped_column(sa.Time)
    duration: Mapped[Decimal] = mapped_column(sa.Numeric(8, 3), nullable=False)
    duration_unit: Mapped[DurationUnit] = mapped_column(
        sa.Enum(DurationUnit, name="duration_unit"), nullable=False
    )
    reason: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    remarks: Mapped[Optional[str]] = mapped_column(sa.String(200))
    status: Mapped[LeaveStatus] = mapped_column(
        sa.Enum(LeaveStatus, name="leave_status"),
        nullable=False,
        default=LeaveStatus.pending,
    )
    # NULL on rows created before the flag existed; treated as "deducted"
    deducted_from_annual_leave: Mapped[Optional[bool]] = mapped_column(
        sa.Boolean, default=False
    )
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True))
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="leave_requests", foreign_keys=[employee_id]
    )

    @property
    def typed_leave_type(self) -> LeaveType:
        return LeaveType(self.leave_type, self.other_leave_type)

    @property
    def leave_type_name(self) -> str:
        return self.typed_leave_type.display_name

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest {self.leave_type.value} {self.start_date}"
            f" {self.status.value}>"
        )


class LedgerEntry(Base):
    """Immutable record of one change to an employee's annual-leave balance."""

    __tablename__ = "annual_leave_ledger"
    __table_args__ = (
        sa.Index("ix_ledger_employee_created", "employee_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[LedgerEntryKind] = mapped_column(
        sa.Enum(LedgerEntryKind, name="ledger_entry_kind"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(sa.Numeric(12, 6), nullable=False)
    balance_after: Mapped[Decimal] = mapped_column(sa.Numeric(12, 6), nullable=False)
    # No FK: history outlives deleted leave requests
    leave_request_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True))
    actor_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True))
    note: Mapped[Optional[str]] = mapped_column(sa.String(200))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )

    def __repr__(self) -> str:
        return f"<LedgerEntry {self.kind.value} {self.amount} → {self.balance_after}>"
