"""Seniority calculator and entitlement table — pure calculation tests."""

from __future__ import annotations

from datetime import date

import pytest

from hr_leave.common.dates import add_years, full_years_between
from hr_leave.leave.entitlement import ENTITLEMENT_RULES, calculate_annual_leave
from hr_leave.leave.seniority import calculate_seniority, seniority_cycle_label


# ═════════════════════════════════════════════════════════════════════
# Calendar helpers
# ═════════════════════════════════════════════════════════════════════


class TestCalendarHelpers:

    def test_add_years_regular_date(self):
        assert add_years(date(2020, 3, 1), 4) == date(2024, 3, 1)

    def test_add_years_leap_day_falls_back_to_28_feb(self):
        assert add_years(date(2020, 2, 29), 1) == date(2021, 2, 28)
        assert add_years(date(2020, 2, 29), 4) == date(2024, 2, 29)

    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (date(2020, 3, 1), date(2020, 3, 1), 0),
            (date(2020, 3, 1), date(2021, 2, 28), 0),
            (date(2020, 3, 1), date(2021, 3, 1), 1),
            (date(2020, 3, 1), date(2030, 2, 28), 9),
            (date(2020, 2, 29), date(2021, 2, 28), 0),
            (date(2020, 2, 29), date(2021, 3, 1), 1),
        ],
    )
    def test_full_years_counts_completed_anniversaries(self, start, end, expected):
        assert full_years_between(start, end) == expected

    def test_full_years_future_start_truncates_toward_zero(self):
        assert full_years_between(date(2025, 6, 1), date(2024, 7, 1)) == 0
        assert full_years_between(date(2026, 6, 1), date(2024, 7, 1)) == -1


# ═════════════════════════════════════════════════════════════════════
# Seniority calculator
# ═════════════════════════════════════════════════════════════════════


class TestSeniority:

    def test_under_one_year(self):
        details = calculate_seniority(date(2023, 1, 1), 0, date(2023, 8, 1))

        assert details.seniority_in_years == 0
        assert details.seniority_in_days_before_correction == 212
        assert details.seniority_in_days_after_correction == 212
        assert details.current_cycle_start_date == date(2023, 1, 1)
        assert details.current_seniority_cycle == "未滿1年"
        assert details.days_until_next_seniority_cycle == 153

    def test_several_years(self):
        details = calculate_seniority(date(2020, 3, 1), 0, date(2024, 6, 1))

        assert details.seniority_in_years == 4
        assert details.current_cycle_start_date == date(2024, 3, 1)
        assert details.current_seniority_cycle == "4年-5年"
        assert details.days_until_next_seniority_cycle == (date(2025, 3, 1) - date(2024, 6, 1)).days

    def test_correction_shifts_days_but_not_years(self):
        details = calculate_seniority(date(2020, 3, 1), 400, date(2021, 2, 1))

        assert details.seniority_in_years == 0
        assert details.seniority_in_days_after_correction == (
            details.seniority_in_days_before_correction + 400
        )
        assert details.seniority_in_years_decimal == pytest.approx(
            details.seniority_in_days_after_correction / 365.25
        )

    def test_negative_correction(self):
        details = calculate_seniority(date(2023, 1, 1), -30, date(2023, 8, 1))
        assert details.seniority_in_days_after_correction == 182

    def test_on_anniversary_day_starts_new_cycle(self):
        details = calculate_seniority(date(2020, 3, 1), 0, date(2023, 3, 1))

        assert details.seniority_in_years == 3
        assert details.current_cycle_start_date == date(2023, 3, 1)
        assert details.days_until_next_seniority_cycle == 366

    def test_future_hire_date_is_not_rejected(self):
        details = calculate_seniority(date(2025, 1, 1), 0, date(2024, 12, 1))

        assert details.seniority_in_years == 0
        assert details.seniority_in_days_before_correction == -31
        assert calculate_annual_leave(
            details.seniority_in_years, details.seniority_in_days_after_correction,
        ) == 0

    @pytest.mark.parametrize(
        "hire, reference, years",
        [
            (date(2016, 2, 29), date(2024, 2, 28), 7),
            (date(2016, 2, 29), date(2024, 2, 29), 8),
            (date(2010, 12, 31), date(2024, 12, 30), 13),
            (date(2010, 12, 31), date(2024, 12, 31), 14),
        ],
    )
    def test_years_are_calendar_anniversaries(self, hire, reference, years):
        assert calculate_seniority(hire, 0, reference).seniority_in_years == years

    def test_cycle_label(self):
        assert seniority_cycle_label(0) == "未滿1年"
        assert seniority_cycle_label(1) == "1年-2年"
        assert seniority_cycle_label(12) == "12年-13年"


# ═════════════════════════════════════════════════════════════════════
# Entitlement table
# ═════════════════════════════════════════════════════════════════════


class TestEntitlement:

    @pytest.mark.parametrize(
        "years, days, expected",
        [
            (0, 179, 0),
            (0, 180, 3),
            (0, 364, 3),
            (0, 365, 0),
            (1, 400, 7),
            (2, 800, 10),
            (3, 1100, 14),
            (4, 1500, 14),
            (5, 1830, 15),
            (9, 3300, 15),
            (10, 3653, 15),
            (15, 5479, 20),
            (25, 9131, 30),
            (40, 14610, 30),
        ],
    )
    def test_tiers(self, years, days, expected):
        assert calculate_annual_leave(years, days) == expected

    def test_day_tier_ignored_once_a_year_is_complete(self):
        assert calculate_annual_leave(1, 0) == 7

    def test_negative_days_grant_nothing(self):
        assert calculate_annual_leave(0, -10) == 0

    def test_rules_table_lists_every_tier(self):
        assert [rule.days for rule in ENTITLEMENT_RULES][:5] == ["3", "7", "10", "14", "15"]
        assert len(ENTITLEMENT_RULES) == 6
