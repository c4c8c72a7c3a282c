"""Statutory annual-leave entitlement table.

Tiers are evaluated top-down and the first match wins; the day-based tier
is only reachable with less than one completed year.
"""

from __future__ import annotations

from dataclasses import dataclass

SIX_MONTHS_IN_DAYS = 180
ONE_YEAR_IN_DAYS = 365
LONG_SERVICE_YEARS = 10
LONG_SERVICE_BASE_DAYS = 15
MAX_ANNUAL_LEAVE_DAYS = 30


@dataclass(frozen=True)
class EntitlementRule:
    description: str
    days: str


# Shown next to the balance in the employee view
ENTITLEMENT_RULES: tuple[EntitlementRule, ...] = (
    EntitlementRule("工作 6 個月以上，未滿 1 年者", "3"),
    EntitlementRule("工作 1 年以上，未滿 2 年者", "7"),
    EntitlementRule("工作 2 年以上，未滿 3 年者", "10"),
    EntitlementRule("工作 3 年以上，未滿 5 年者", "14"),
    EntitlementRule("工作 5 年以上，未滿 10 年者", "15"),
    EntitlementRule("工作 10 年以上者，每 1 年加給 1 日", "15 + (年資 - 10)，至多 30"),
)


def calculate_annual_leave(seniority_in_years: int, seniority_in_days_after_correction: int) -> int:
    """Annual-leave days for the given tenure."""
    if seniority_in_years >= LONG_SERVICE_YEARS:
        extra_years = seniority_in_years - LONG_SERVICE_YEARS
        return min(LONG_SERVICE_BASE_DAYS + extra_years, MAX_ANNUAL_LEAVE_DAYS)
    if seniority_in_years >= 5:
        return 15
    if seniority_in_years >= 3:
        return 14
    if seniority_in_years >= 2:
        return 10
    if seniority_in_years >= 1:
        return 7
    if SIX_MONTHS_IN_DAYS <= seniority_in_days_after_correction < ONE_YEAR_IN_DAYS:
        return 3
    return 0
