"""Calendar helpers shared by the seniority and usage calculations."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from hr_leave.config import settings


def local_today() -> date:
    """Today's date in the company timezone (day granularity)."""
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def add_years(value: date, years: int) -> date:
    """Shift ``value`` by whole calendar years; 29 Feb falls back to 28 Feb."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def full_years_between(start: date, end: date) -> int:
    """Completed anniversaries from ``start`` to ``end``, truncated toward zero."""
    if end < start:
        return -full_years_between(end, start)
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years
