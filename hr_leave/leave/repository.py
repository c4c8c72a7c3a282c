"""Persistence collaborator for the balance ledger.

Wraps an ``AsyncSession`` behind the small data-access surface the ledger
needs. Missing rows raise ``NotFoundException``; any database failure is
logged and re-raised as ``PersistenceException`` so callers can stop a
multi-step operation at the first failure.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_leave.common.constants import LeaveStatus, LedgerEntryKind
from hr_leave.common.exceptions import (
    ConflictError,
    NotFoundException,
    PersistenceException,
)
from hr_leave.employees.models import Employee
from hr_leave.leave.models import LeaveRequest, LedgerEntry

logger = logging.getLogger(__name__)


@contextmanager
def _persistence(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Persistence failure in %s: %s", operation, exc)
        raise PersistenceException(operation, exc.__class__.__name__) from exc


class LeaveRepository:
    """Async data access for employees, leave requests and ledger entries."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ─────────────────────────────────────────────────────────────────
    # Employees
    # ─────────────────────────────────────────────────────────────────

    async def get_employee(self, employee_id: uuid.UUID) -> Employee:
        # populate_existing: always return the stored balance, never a cached one
        with _persistence("get_employee"):
            result = await self.db.execute(
                select(Employee)
                .where(Employee.id == employee_id)
                .execution_options(populate_existing=True)
            )
            employee = result.scalars().first()
        if employee is None:
            raise NotFoundException("Employee", str(employee_id))
        return employee

    async def list_employees(self) -> list[Employee]:
        with _persistence("list_employees"):
            result = await self.db.execute(
                select(Employee)
                .order_by(Employee.hire_date, Employee.username)
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def add_employee(self, employee: Employee) -> Employee:
        self.db.add(employee)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("username", employee.username) from exc
        except SQLAlchemyError as exc:
            logger.error("Persistence failure in add_employee: %s", exc)
            raise PersistenceException("add_employee", exc.__class__.__name__) from exc
        return employee

    async def update_employee(self, employee_id: uuid.UUID, **fields: Any) -> Employee:
        employee = await self.get_employee(employee_id)
        for key, value in fields.items():
            setattr(employee, key, value)
        employee.updated_at = datetime.now(timezone.utc)
        try:
            await self.db.flush()
        except IntegrityError as exc:
            await self.db.rollback()
            if "username" in fields:
                raise ConflictError("username", fields["username"]) from exc
            logger.error("Persistence failure in update_employee: %s", exc)
            raise PersistenceException("update_employee", exc.__class__.__name__) from exc
        except SQLAlchemyError as exc:
            logger.error("Persistence failure in update_employee: %s", exc)
            raise PersistenceException("update_employee", exc.__class__.__name__) from exc
        return employee

    async def get_employee_by_username(self, username: str) -> Optional[Employee]:
        with _persistence("get_employee_by_username"):
            result = await self.db.execute(
                select(Employee)
                .where(Employee.username == username)
                .execution_options(populate_existing=True)
            )
            return result.scalars().first()

    async def upsert_employees(self, records: list[dict[str, Any]]) -> None:
        """Bulk update employee rows keyed by ``id``."""
        if not records:
            return
        now = datetime.now(timezone.utc)
        rows = [{**record, "updated_at": now} for record in records]
        with _persistence("upsert_employees"):
            await self.db.execute(update(Employee), rows)
            await self.db.flush()

    async def adjust_remaining(self, employee_id: uuid.UUID, delta: Decimal) -> Decimal:
        """Atomically add ``delta`` to the stored balance and return the new value."""
        with _persistence("adjust_remaining"):
            result = await self.db.execute(
                update(Employee)
                .where(Employee.id == employee_id)
                .values(
                    remaining_annual_leave_days=Employee.remaining_annual_leave_days + delta,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Employee", str(employee_id))
        employee = await self.get_employee(employee_id)
        return employee.remaining_annual_leave_days

    async def delete_employee(self, employee_id: uuid.UUID) -> None:
        with _persistence("delete_employee"):
            result = await self.db.execute(
                delete(Employee)
                .where(Employee.id == employee_id)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Employee", str(employee_id))

    # ─────────────────────────────────────────────────────────────────
    # Leave requests
    # ─────────────────────────────────────────────────────────────────

    async def list_leave_requests(
        self,
        employee_id: Optional[uuid.UUID] = None,
        *,
        status: Optional[LeaveStatus] = None,
    ) -> list[LeaveRequest]:
        """Requests newest-first, optionally for one employee / one status."""
        query = select(LeaveRequest).order_by(
            LeaveRequest.start_date.desc(), LeaveRequest.created_at.desc(),
        )
        if employee_id is not None:
            query = query.where(LeaveRequest.employee_id == employee_id)
        if status is not None:
            query = query.where(LeaveRequest.status == status)
        with _persistence("list_leave_requests"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def get_leave_request(self, request_id: uuid.UUID) -> LeaveRequest:
        with _persistence("get_leave_request"):
            result = await self.db.execute(
                select(LeaveRequest)
                .where(LeaveRequest.id == request_id)
                .execution_options(populate_existing=True)
            )
            leave_req = result.scalars().first()
        if leave_req is None:
            raise NotFoundException("LeaveRequest", str(request_id))
        return leave_req

    async def add_leave_request(self, leave_req: LeaveRequest) -> LeaveRequest:
        with _persistence("add_leave_request"):
            self.db.add(leave_req)
            await self.db.flush()
        return leave_req

    async def update_leave_request(self, request_id: uuid.UUID, **fields: Any) -> LeaveRequest:
        leave_req = await self.get_leave_request(request_id)
        with _persistence("update_leave_request"):
            for key, value in fields.items():
                setattr(leave_req, key, value)
            leave_req.updated_at = datetime.now(timezone.utc)
            await self.db.flush()
        return leave_req

    async def delete_leave_request(self, request_id: uuid.UUID) -> None:
        leave_req = await self.get_leave_request(request_id)
        with _persistence("delete_leave_request"):
            await self.db.delete(leave_req)
            await self.db.flush()

    async def delete_leave_requests_for(self, employee_id: uuid.UUID) -> int:
        with _persistence("delete_leave_requests_for"):
            result = await self.db.execute(
                delete(LeaveRequest)
                .where(LeaveRequest.employee_id == employee_id)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount

    # ─────────────────────────────────────────────────────────────────
    # Ledger entries
    # ─────────────────────────────────────────────────────────────────

    async def add_ledger_entry(
        self,
        *,
        employee_id: uuid.UUID,
        kind: LedgerEntryKind,
        amount: Decimal,
        balance_after: Decimal,
        actor_id: Optional[uuid.UUID] = None,
        leave_request_id: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            employee_id=employee_id,
            kind=kind,
            amount=amount,
            balance_after=balance_after,
            actor_id=actor_id,
            leave_request_id=leave_request_id,
            note=note,
        )
        with _persistence("add_ledger_entry"):
            self.db.add(entry)
            await self.db.flush()
        return entry

    async def list_ledger_entries(self, employee_id: uuid.UUID) -> list[LedgerEntry]:
        with _persistence("list_ledger_entries"):
            result = await self.db.execute(
                select(LedgerEntry)
                .where(LedgerEntry.employee_id == employee_id)
                .order_by(LedgerEntry.created_at.desc())
            )
            return list(result.scalars().all())
