"""Pure domain helpers for the recognition kernel (no I/O)."""

from recognition_kernel.domain.calendar import (
    PeriodUnit,
    add_months,
    add_periods,
    fiscal_year_bounds,
    fiscal_year_of,
    is_due,
    months_inclusive,
)
from recognition_kernel.domain.clock import Clock, DeterministicClock, SystemClock

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "PeriodUnit",
    "add_months",
    "add_periods",
    "fiscal_year_bounds",
    "fiscal_year_of",
    "is_due",
    "months_inclusive",
]
