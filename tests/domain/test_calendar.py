"""
Calendar / period utility tests.

Month stepping, fiscal-year bounds, whole-month counting and due checks.
"""

from datetime import date

import pytest
from hypothesis import given
from hypothesis import strategies as st

from recognition_kernel.domain.calendar import (
    PeriodUnit,
    add_months,
    add_periods,
    fiscal_year_bounds,
    fiscal_year_of,
    is_due,
    months_inclusive,
    validate_fiscal_start_month,
)
from recognition_kernel.exceptions import ValidationError


class TestAddMonths:

    def test_simple_step(self):
        assert add_months(date(2025, 1, 1), 1) == date(2025, 2, 1)

    def test_year_rollover(self):
        assert add_months(date(2025, 12, 15), 1) == date(2026, 1, 15)

    def test_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)

    def test_clamps_to_leap_day(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_negative_months(self):
        assert add_months(date(2025, 3, 31), -1) == date(2025, 2, 28)

    def test_zero_months_is_identity(self):
        assert add_months(date(2025, 7, 9), 0) == date(2025, 7, 9)


class TestAddPeriods:

    @pytest.mark.parametrize("unit,expected", [
        (PeriodUnit.MONTHLY, date(2025, 2, 1)),
        (PeriodUnit.QUARTERLY, date(2025, 4, 1)),
        (PeriodUnit.ANNUALLY, date(2026, 1, 1)),
    ])
    def test_one_period(self, unit, expected):
        assert add_periods(date(2025, 1, 1), 1, unit) == expected

    def test_anchor_stepping_does_not_drift(self):
        """Stepping from the anchor keeps the 31st where the month allows it."""
        start = date(2025, 1, 31)
        assert add_periods(start, 1, PeriodUnit.MONTHLY) == date(2025, 2, 28)
        assert add_periods(start, 2, PeriodUnit.MONTHLY) == date(2025, 3, 31)

    @given(
        start=st.dates(min_value=date(1990, 1, 1), max_value=date(2090, 12, 31)),
        count=st.integers(min_value=0, max_value=120),
    )
    def test_strictly_increasing_in_count(self, start, count):
        assert (
            add_periods(start, count, PeriodUnit.MONTHLY)
            < add_periods(start, count + 1, PeriodUnit.MONTHLY)
        )


class TestIsDue:

    def test_due_on_the_day(self):
        assert is_due(date(2025, 2, 1), date(2025, 2, 1))

    def test_due_after(self):
        assert is_due(date(2025, 2, 1), date(2025, 3, 1))

    def test_not_due_before(self):
        assert not is_due(date(2025, 2, 1), date(2025, 1, 31))


class TestFiscalYear:

    def test_calendar_year_when_january_start(self):
        assert fiscal_year_bounds(2025) == (date(2025, 1, 1), date(2025, 12, 31))

    def test_april_start_spans_into_next_year(self):
        assert fiscal_year_bounds(2025, 4) == (date(2025, 4, 1), date(2026, 3, 31))

    def test_february_end_in_leap_year(self):
        assert fiscal_year_bounds(2023, 3) == (date(2023, 3, 1), date(2024, 2, 29))

    def test_fiscal_year_of(self):
        assert fiscal_year_of(date(2025, 3, 31), 4) == 2024
        assert fiscal_year_of(date(2025, 4, 1), 4) == 2025
        assert fiscal_year_of(date(2025, 12, 31)) == 2025

    @pytest.mark.parametrize("month", [0, 13, -1, True, "4"])
    def test_invalid_start_month_rejected(self, month):
        with pytest.raises(ValidationError) as exc_info:
            fiscal_year_bounds(2025, month)
        assert exc_info.value.field == "fiscal_year_start_month"

    def test_validate_returns_month(self):
        assert validate_fiscal_start_month(7) == 7

    @given(
        year=st.integers(min_value=1950, max_value=2150),
        month=st.integers(min_value=1, max_value=12),
    )
    def test_bounds_are_contiguous(self, year, month):
        _, end = fiscal_year_bounds(year, month)
        next_start, _ = fiscal_year_bounds(year + 1, month)
        assert (next_start - end).days == 1


class TestMonthsInclusive:

    def test_full_year(self):
        assert months_inclusive(date(2025, 1, 1), date(2025, 12, 31)) == 12

    def test_partial_counts_whole_months(self):
        assert months_inclusive(date(2025, 7, 20), date(2025, 12, 31)) == 6

    def test_same_month(self):
        assert months_inclusive(date(2025, 5, 31), date(2025, 5, 1)) == 1

    def test_reversed_is_zero(self):
        assert months_inclusive(date(2025, 6, 1), date(2025, 1, 1)) == 0
