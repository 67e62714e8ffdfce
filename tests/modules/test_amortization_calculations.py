"""
Amortization entry-plan tests.

Pure calculation: amounts, remainder handling, due-date spacing and term
validation.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from recognition_kernel.domain.calendar import PeriodUnit, add_periods
from recognition_kernel.exceptions import ValidationError
from recognition_modules.amortization.calculations import (
    build_entry_plan,
    period_amount,
    schedule_end_date,
    validate_terms,
)


class TestBuildEntryPlan:

    def test_even_split_monthly(self):
        plan = build_entry_plan(Decimal("1200000"), date(2025, 1, 1), 12, PeriodUnit.MONTHLY)

        assert len(plan) == 12
        assert all(line.amount == Decimal("100000.00") for line in plan)
        assert plan[0].due_date == date(2025, 2, 1)
        assert plan[-1].due_date == date(2026, 1, 1)
        assert [line.sequence for line in plan] == list(range(1, 13))

    def test_remainder_goes_to_last_entry(self):
        plan = build_entry_plan(Decimal("100"), date(2025, 1, 1), 3, PeriodUnit.MONTHLY)

        assert [line.amount for line in plan] == [
            Decimal("33.33"), Decimal("33.33"), Decimal("33.34"),
        ]

    def test_period_bounds(self):
        plan = build_entry_plan(Decimal("900"), date(2025, 1, 15), 3, PeriodUnit.MONTHLY)

        first = plan[0]
        assert first.period_start == date(2025, 1, 15)
        assert first.due_date == date(2025, 2, 15)
        assert first.period_end == date(2025, 2, 14)
        assert plan[1].period_start == first.due_date

    def test_quarterly(self):
        plan = build_entry_plan(Decimal("4000"), date(2025, 1, 1), 4, PeriodUnit.QUARTERLY)
        assert [line.due_date for line in plan] == [
            date(2025, 4, 1), date(2025, 7, 1), date(2025, 10, 1), date(2026, 1, 1),
        ]

    def test_month_end_start_clamps_without_drift(self):
        plan = build_entry_plan(Decimal("300"), date(2025, 1, 31), 3, PeriodUnit.MONTHLY)
        assert [line.due_date for line in plan] == [
            date(2025, 2, 28), date(2025, 3, 31), date(2025, 4, 30),
        ]

    def test_single_period(self):
        plan = build_entry_plan(Decimal("999.99"), date(2025, 1, 1), 1, PeriodUnit.ANNUALLY)
        assert len(plan) == 1
        assert plan[0].amount == Decimal("999.99")
        assert plan[0].due_date == date(2026, 1, 1)

    def test_end_date_is_last_due_date(self):
        assert schedule_end_date(date(2025, 1, 1), 12, PeriodUnit.MONTHLY) == date(2026, 1, 1)


class TestValidateTerms:

    @pytest.mark.parametrize("term", [0, -1])
    def test_non_positive_term(self, term):
        with pytest.raises(ValidationError) as exc_info:
            validate_terms(Decimal("100"), term)
        assert exc_info.value.field == "term"

    @pytest.mark.parametrize("principal", [Decimal("0"), Decimal("-5")])
    def test_non_positive_principal(self, principal):
        with pytest.raises(ValidationError) as exc_info:
            validate_terms(principal, 12)
        assert exc_info.value.field == "principal"

    def test_float_principal_rejected(self):
        with pytest.raises(ValidationError):
            validate_terms(100.0, 12)

    def test_sub_cent_principal_rejected(self):
        with pytest.raises(ValidationError):
            validate_terms(Decimal("10.001"), 2)

    def test_per_period_amount_truncating_to_zero(self):
        with pytest.raises(ValidationError):
            validate_terms(Decimal("0.05"), 12)

    def test_period_amount_truncates(self):
        assert period_amount(Decimal("100"), 3) == Decimal("33.33")
        assert period_amount(Decimal("200"), 3) == Decimal("66.66")


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

principals = st.decimals(
    min_value=Decimal("1.00"),
    max_value=Decimal("1000000000.00"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)


class TestEntryPlanProperties:

    @settings(max_examples=200)
    @given(
        principal=principals,
        term=st.integers(min_value=1, max_value=100),
        start=st.dates(min_value=date(2000, 1, 1), max_value=date(2080, 12, 31)),
        unit=st.sampled_from(list(PeriodUnit)),
    )
    def test_plan_invariants(self, principal, term, start, unit):
        if period_amount(principal, term) <= 0:
            with pytest.raises(ValidationError):
                build_entry_plan(principal, start, term, unit)
            return

        plan = build_entry_plan(principal, start, term, unit)

        assert sum(line.amount for line in plan) == principal
        assert plan[0].due_date == add_periods(start, 1, unit)
        assert all(a.due_date < b.due_date for a, b in zip(plan, plan[1:]))
        assert all(line.period_end == line.due_date - timedelta(days=1) for line in plan)
        assert all(line.amount > 0 for line in plan)
        assert all(line.amount == plan[0].amount for line in plan[:-1])
