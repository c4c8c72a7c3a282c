"""Seniority calculator — tenure metrics from a hire date as of a reference date.

Pure functions, no I/O. ``reference_date`` defaults to today in the company
timezone; callers that need determinism (tests, batch jobs) pass it in.

Note: ``seniority_in_years`` counts anniversaries from the *uncorrected*
calendar difference. ``correction_days`` only shifts the day-based figures,
so it never moves an employee across a years-based entitlement tier.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from hr_leave.common.constants import UNDER_ONE_YEAR_CYCLE_LABEL
from hr_leave.common.dates import add_years, full_years_between, local_today

DAYS_PER_SOLAR_YEAR = 365.25


@dataclass(frozen=True)
class SeniorityDetails:
    seniority_in_years: int
    seniority_in_years_decimal: float
    seniority_in_days_before_correction: int
    seniority_in_days_after_correction: int
    days_until_next_seniority_cycle: int
    current_seniority_cycle: str
    current_cycle_start_date: date


def seniority_cycle_label(years: int) -> str:
    if years < 1:
        return UNDER_ONE_YEAR_CYCLE_LABEL
    return f"{years}年-{years + 1}年"


def calculate_seniority(
    hire_date: date,
    correction_days: int = 0,
    reference_date: Optional[date] = None,
) -> SeniorityDetails:
    """Compute tenure as of ``reference_date``.

    Future hire dates are not rejected: they produce negative day counts and
    a non-positive year count, which the entitlement table maps to no leave.
    """
    today = reference_date or local_today()

    days_before = (today - hire_date).days
    days_after = days_before + (correction_days or 0)
    years = full_years_between(hire_date, today)

    if years < 1:
        next_anniversary = add_years(hire_date, 1)
    else:
        next_anniversary = add_years(hire_date, years + 1)

    return SeniorityDetails(
        seniority_in_years=years,
        seniority_in_years_decimal=days_after / DAYS_PER_SOLAR_YEAR,
        seniority_in_days_before_correction=days_before,
        seniority_in_days_after_correction=days_after,
        days_until_next_seniority_cycle=(next_anniversary - today).days,
        current_seniority_cycle=seniority_cycle_label(years),
        current_cycle_start_date=add_years(hire_date, years),
    )
