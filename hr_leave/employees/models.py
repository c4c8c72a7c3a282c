"""Employee ORM model.

SQLAlchemy 2.0 async-compatible model with Mapped[] annotations. The
annual-leave balance lives on the employee row and is only changed by the
balance ledger (grant / deduct / credit-back / adjust).
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_leave.common.constants import UserRole
from hr_leave.database import Base

if TYPE_CHECKING:
    from hr_leave.leave.models import LeaveRequest


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Employee(Base):
    """Staff member with hire date, seniority correction and leave balance."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(sa.String(50), unique=True, nullable=False)
    # NULL: no password set, login refused until an admin resets it
    password_hash: Mapped[Optional[str]] = mapped_column(sa.String(255))
    name: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    gender: Mapped[Optional[str]] = mapped_column(sa.String(20))
    job_title: Mapped[Optional[str]] = mapped_column(sa.String(100))
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.employee,
    )
    hire_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    seniority_correction_days: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=0,
    )
    # Scale 6 holds any hourly deduction (hours / 8) exactly
    remaining_annual_leave_days: Mapped[Decimal] = mapped_column(
        sa.Numeric(12, 6), nullable=False, default=Decimal("0"),
    )
    last_annual_leave_grant_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow,
    )

    # ── Relationships ───────────────────────────────────────────────
    leave_requests: Mapped[list[LeaveRequest]] = relationship(
        back_populates="employee",
        foreign_keys="LeaveRequest.employee_id",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Employee {self.username!r}>"
