"""Common module — shared utilities for the leave ledger service."""

from hr_leave.common.constants import (
    HOURS_PER_DAY,
    LEAVE_KIND_NAMES,
    PERMISSIONS,
    TIME_FORMAT,
    DurationUnit,
    LeaveKind,
    LeaveStatus,
    LedgerEntryKind,
    UserRole,
)
from hr_leave.common.dates import add_years, full_years_between, local_today
from hr_leave.common.exceptions import (
    AppException,
    ConflictError,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    PersistenceException,
    UnauthorizedException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Constants / Enums
    "DurationUnit",
    "LeaveKind",
    "LeaveStatus",
    "LedgerEntryKind",
    "UserRole",
    "PERMISSIONS",
    "LEAVE_KIND_NAMES",
    "HOURS_PER_DAY",
    "TIME_FORMAT",
    # Dates
    "add_years",
    "full_years_between",
    "local_today",
    # Exceptions
    "AppException",
    "ConflictError",
    "ForbiddenException",
    "InvalidStateException",
    "NotFoundException",
    "PersistenceException",
    "UnauthorizedException",
    "ValidationException",
    "register_exception_handlers",
]
