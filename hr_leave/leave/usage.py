"""Leave usage aggregation.

``used_annual_leave_days`` recomputes consumption from request history and
is for display only; the balance ledger never reads it. ``ledger_used_days``
derives the same figure from deduction entries so the two can be compared.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable

from hr_leave.common.constants import (
    HOURS_PER_DAY,
    DurationUnit,
    LeaveKind,
    LeaveStatus,
    LedgerEntryKind,
)
from hr_leave.common.dates import add_years
from hr_leave.leave.models import LeaveRequest, LedgerEntry


def to_day_equivalent(duration: Decimal, unit: DurationUnit) -> Decimal:
    """Convert a request duration to days (hours / 8)."""
    duration = Decimal(duration)
    if unit == DurationUnit.hour:
        return duration / HOURS_PER_DAY
    return duration


def used_annual_leave_days(
    cycle_start: date,
    requests: Iterable[LeaveRequest],
) -> Decimal:
    """Sum approved annual leave starting inside [cycle_start, cycle_start + 1 year)."""
    cycle_end = add_years(cycle_start, 1)
    total = Decimal("0")
    for req in requests:
        if req.status != LeaveStatus.approved or req.leave_type != LeaveKind.annual:
            continue
        if cycle_start <= req.start_date < cycle_end:
            total += to_day_equivalent(req.duration, req.duration_unit)
    return total


def ledger_used_days(
    entries: Iterable[LedgerEntry],
    live_request_ids: Iterable[uuid.UUID],
) -> Decimal:
    """Sum deductions whose leave request still exists and is approved."""
    live = set(live_request_ids)
    total = Decimal("0")
    for entry in entries:
        if entry.kind == LedgerEntryKind.deduct and entry.leave_request_id in live:
            total += -entry.amount
    return total
