"""Leave request filing, editing and listing — schema rules and service."""

from __future__ import annotations

import uuid
from datetime import date, time
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hr_leave.common.constants import DurationUnit, LeaveKind, LeaveStatus
from hr_leave.common.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from hr_leave.leave.repository import LeaveRepository
from hr_leave.leave.schemas import LeaveRequestCreate, LeaveRequestUpdate
from hr_leave.leave.service import LeaveService
from tests.conftest import (
    admin_ctx,
    employee_ctx,
    seed_employee,
    seed_leave_request,
)


def _payload(**overrides) -> dict:
    data = {
        "leave_type": "annual",
        "start_date": "2024-06-10",
        "end_date": "2024-06-11",
        "duration": "2",
        "reason": "Family trip",
    }
    data.update(overrides)
    return data


# ═════════════════════════════════════════════════════════════════════
# Schema validation
# ═════════════════════════════════════════════════════════════════════


class TestRequestValidation:

    def test_valid_daily_request(self):
        body = LeaveRequestCreate(**_payload(start_time="09:00", end_time="12:00"))

        assert body.duration_unit == DurationUnit.day
        assert body.start_time is None
        assert body.end_time is None
        assert body.employee_id is None

    def test_valid_hourly_request(self):
        body = LeaveRequestCreate(**_payload(
            is_hourly=True, end_date="2024-06-10", duration="3",
            start_time="09:00", end_time="12:00",
        ))

        assert body.duration_unit == DurationUnit.hour
        assert body.start_time == time(9, 0)

    def test_end_before_start(self):
        with pytest.raises(ValidationError, match="end_date"):
            LeaveRequestCreate(**_payload(end_date="2024-06-09"))

    def test_hourly_requires_times(self):
        with pytest.raises(ValidationError, match="start_time and end_time"):
            LeaveRequestCreate(**_payload(is_hourly=True, start_time="09:00"))

    def test_same_day_end_time_before_start_time(self):
        with pytest.raises(ValidationError, match="end_time"):
            LeaveRequestCreate(**_payload(
                is_hourly=True, end_date="2024-06-10", start_time="14:00", end_time="10:00",
            ))

    def test_multi_day_hourly_allows_earlier_end_time(self):
        body = LeaveRequestCreate(**_payload(is_hourly=True, start_time="14:00", end_time="10:00"))
        assert body.end_time == time(10, 0)

    @pytest.mark.parametrize("duration", ["0", "-1"])
    def test_duration_must_be_positive(self, duration):
        with pytest.raises(ValidationError):
            LeaveRequestCreate(**_payload(duration=duration))

    def test_reason_length(self):
        with pytest.raises(ValidationError):
            LeaveRequestCreate(**_payload(reason=""))
        with pytest.raises(ValidationError):
            LeaveRequestCreate(**_payload(reason="x" * 101))

    def test_remarks_length(self):
        with pytest.raises(ValidationError):
            LeaveRequestCreate(**_payload(remarks="x" * 201))

    def test_other_requires_label(self):
        with pytest.raises(ValidationError, match="other_leave_type"):
            LeaveRequestCreate(**_payload(leave_type="other"))

    def test_other_label_is_trimmed(self):
        body = LeaveRequestCreate(**_payload(leave_type="other", other_leave_type="  婚假 "))
        assert body.other_leave_type == "婚假"

    def test_label_dropped_for_named_kinds(self):
        body = LeaveRequestCreate(**_payload(leave_type="sick", other_leave_type="flu"))
        assert body.other_leave_type is None

    def test_unknown_leave_type(self):
        with pytest.raises(ValidationError):
            LeaveRequestCreate(**_payload(leave_type="vacation"))


# ═════════════════════════════════════════════════════════════════════
# Service
# ═════════════════════════════════════════════════════════════════════


class TestSubmit:

    async def test_employee_files_own_request(self, db):
        emp = await seed_employee(db)
        service = LeaveService(LeaveRepository(db))

        out = await service.submit_request(employee_ctx(emp.id), LeaveRequestCreate(**_payload()))

        assert out.employee_id == emp.id
        assert out.submitted_by == emp.id
        assert out.status == LeaveStatus.pending
        assert out.duration_unit == DurationUnit.day
        assert out.deducted_from_annual_leave is False
        assert out.leave_type_name == "特休"

    async def test_submit_does_not_touch_balance(self, db):
        emp = await seed_employee(db, remaining=Decimal("4"))
        service = LeaveService(LeaveRepository(db))

        await service.submit_request(employee_ctx(emp.id), LeaveRequestCreate(**_payload()))

        fresh = await LeaveRepository(db).get_employee(emp.id)
        assert fresh.remaining_annual_leave_days == Decimal("4")

    async def test_admin_files_for_another_employee(self, db):
        emp = await seed_employee(db)
        actor = admin_ctx()
        service = LeaveService(LeaveRepository(db))

        out = await service.submit_request(
            actor, LeaveRequestCreate(**_payload(employee_id=str(emp.id))),
        )

        assert out.employee_id == emp.id
        assert out.submitted_by == actor.actor_id

    async def test_employee_cannot_file_for_someone_else(self, db):
        emp = await seed_employee(db)
        other = await seed_employee(db)
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(ForbiddenException):
            await service.submit_request(
                employee_ctx(emp.id), LeaveRequestCreate(**_payload(employee_id=str(other.id))),
            )

    async def test_unknown_target_employee(self, db):
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(NotFoundException):
            await service.submit_request(
                admin_ctx(), LeaveRequestCreate(**_payload(employee_id=str(uuid.uuid4()))),
            )


class TestUpdate:

    async def test_edit_pending_request(self, db):
        emp = await seed_employee(db)
        req = await seed_leave_request(db, emp.id, leave_type=LeaveKind.sick)
        service = LeaveService(LeaveRepository(db))

        out = await service.update_request(
            employee_ctx(emp.id),
            req.id,
            LeaveRequestUpdate(**_payload(
                leave_type="other", other_leave_type="喪假", duration="3", end_date="2024-06-12",
            )),
        )

        assert out.leave_type == LeaveKind.other
        assert out.leave_type_name == "其他: 喪假"
        assert out.duration == Decimal("3")
        assert out.end_date == date(2024, 6, 12)

    async def test_reviewed_request_is_frozen(self, db):
        emp = await seed_employee(db)
        req = await seed_leave_request(db, emp.id, status=LeaveStatus.approved, deducted=True)
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(InvalidStateException):
            await service.update_request(employee_ctx(emp.id), req.id, LeaveRequestUpdate(**_payload()))

    async def test_stranger_cannot_edit(self, db):
        emp = await seed_employee(db)
        other = await seed_employee(db)
        req = await seed_leave_request(db, emp.id)
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(ForbiddenException):
            await service.update_request(employee_ctx(other.id), req.id, LeaveRequestUpdate(**_payload()))


class TestList:

    async def test_lists_newest_start_date_first(self, db):
        emp = await seed_employee(db)
        await seed_leave_request(db, emp.id, start_date=date(2024, 1, 5))
        await seed_leave_request(db, emp.id, start_date=date(2024, 7, 1))
        await seed_leave_request(db, emp.id, start_date=date(2024, 3, 9))
        service = LeaveService(LeaveRepository(db))

        out = await service.list_requests(employee_ctx(emp.id), employee_id=emp.id)

        assert [r.start_date for r in out] == [date(2024, 7, 1), date(2024, 3, 9), date(2024, 1, 5)]

    async def test_status_filter(self, db):
        emp = await seed_employee(db)
        await seed_leave_request(db, emp.id, status=LeaveStatus.rejected)
        pending = await seed_leave_request(db, emp.id)
        service = LeaveService(LeaveRepository(db))

        out = await service.list_requests(admin_ctx(), status=LeaveStatus.pending)

        assert [r.id for r in out] == [pending.id]

    async def test_employee_cannot_list_everyone(self, db):
        emp = await seed_employee(db)
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(ForbiddenException):
            await service.list_requests(employee_ctx(emp.id))

    async def test_employee_cannot_read_others_request(self, db):
        emp = await seed_employee(db)
        other = await seed_employee(db)
        req = await seed_leave_request(db, other.id)
        service = LeaveService(LeaveRepository(db))

        with pytest.raises(ForbiddenException):
            await service.get_request(employee_ctx(emp.id), req.id)


def test_preview_seniority():
    out = LeaveService.preview_seniority(date(2014, 5, 1), 0, date(2024, 6, 1))

    assert out.seniority.seniority_in_years == 10
    assert out.annual_leave_entitlement == 15
    assert out.reference_date == date(2024, 6, 1)


def test_entitlement_rules():
    rules = LeaveService.entitlement_rules()
    assert rules[0].days == "3"
