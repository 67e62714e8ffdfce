"""
Calendar / Period Utility.

Responsibility:
    Pure date arithmetic shared by the amortization engine and the
    depreciation calculator: stepping dates by whole periods, fiscal-year
    boundaries, whole-month counting, and "due by" comparisons.

Architecture position:
    Kernel > Domain -- pure functions, no state, no I/O.

Conventions:
    - Month stepping clamps to the last day of the target month
      (2025-01-31 + 1 month = 2025-02-28).  Callers that need a series of
      dates step from a fixed anchor (``add_periods(start, n)``) rather than
      chaining, so clamping never accumulates.
    - Fiscal year ``Y`` begins on day 1 of ``fiscal_start_month`` in
      calendar year ``Y`` and ends the day before that month in ``Y + 1``.
      With a January start the fiscal year equals the calendar year.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from enum import Enum

from recognition_kernel.exceptions import ValidationError


class PeriodUnit(Enum):
    """Length of one amortization period."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def months(self) -> int:
        return _MONTHS_PER_UNIT[self]


_MONTHS_PER_UNIT = {
    PeriodUnit.MONTHLY: 1,
    PeriodUnit.QUARTERLY: 3,
    PeriodUnit.ANNUALLY: 12,
}


def add_months(value: date, months: int) -> date:
    """Step *value* by *months* calendar months, clamping the day."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def add_periods(value: date, count: int, unit: PeriodUnit) -> date:
    """Return the date *count* periods of *unit* after *value*."""
    return add_months(value, count * unit.months)


def is_due(due_date: date, as_of: date) -> bool:
    """An entry is due once its due date is on or before *as_of*."""
    return due_date <= as_of


def validate_fiscal_start_month(month: int) -> int:
    """Return *month* unchanged, or raise ``ValidationError`` if not 1..12."""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValidationError(
            "fiscal_year_start_month",
            f"must be an integer between 1 and 12, got {month!r}",
        )
    return month


def fiscal_year_bounds(year: int, fiscal_start_month: int = 1) -> tuple[date, date]:
    """
    First and last day of fiscal year *year*.

    The span is exactly twelve months starting on day 1 of
    *fiscal_start_month* in calendar year *year*.

    Raises:
        ValidationError: If *fiscal_start_month* is outside 1..12.
    """
    validate_fiscal_start_month(fiscal_start_month)
    start = date(year, fiscal_start_month, 1)
    end = add_months(start, 12) - timedelta(days=1)
    return start, end


def fiscal_year_of(value: date, fiscal_start_month: int = 1) -> int:
    """The fiscal year that contains *value*."""
    validate_fiscal_start_month(fiscal_start_month)
    if value.month >= fiscal_start_month:
        return value.year
    return value.year - 1


def months_inclusive(first: date, last: date) -> int:
    """
    Whole calendar months from *first*'s month through *last*'s month.

    Both end months count in full; returns 0 when *last* precedes *first*.
    """
    months = (last.year - first.year) * 12 + (last.month - first.month) + 1
    return max(months, 0)
