"""Enums and constants for the leave ledger — matching the database ENUM types."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class LeaveKind(str, enum.Enum):
    annual = "annual"
    personal = "personal"
    sick = "sick"
    menstrual = "menstrual"
    other = "other"


class DurationUnit(str, enum.Enum):
    day = "day"
    hour = "hour"


class LedgerEntryKind(str, enum.Enum):
    grant = "grant"
    deduct = "deduct"
    credit = "credit"
    adjust = "adjust"


# Display names used by the staff-facing UI and legacy records
LEAVE_KIND_NAMES: dict[LeaveKind, str] = {
    LeaveKind.annual: "特休",
    LeaveKind.personal: "事假",
    LeaveKind.sick: "病假",
    LeaveKind.menstrual: "生理假",
    LeaveKind.other: "其他",
}

OTHER_LEAVE_PREFIX = "其他:"

# Hourly leave is converted to days with a fixed workday length
HOURS_PER_DAY = 8

UNDER_ONE_YEAR_CYCLE_LABEL = "未滿1年"


# ── Role-based permissions ──────────────────────────────────────────

PERMISSIONS: dict[UserRole, list[str]] = {
    UserRole.employee: [
        "profile:read_own",
        "profile:change_password",
        "leave:request",
        "leave:read_own",
        "leave:delete_own",
    ],
    UserRole.admin: [
        "profile:read_own",
        "profile:change_password",
        "profile:read_all",
        "profile:create",
        "profile:update",
        "profile:delete",
        "profile:reset_password",
        "leave:request",
        "leave:request_for_others",
        "leave:read_own",
        "leave:read_all",
        "leave:delete_own",
        "leave:delete_any",
        "leave:approve",
        "leave:reject",
        "leave:grant",
        "leave:adjust",
    ],
}

# ── Misc constants ──────────────────────────────────────────────────

TIME_FORMAT = "%H:%M"
