"""
Amortization Calculations (``recognition_modules.amortization.calculations``).

Responsibility
--------------
Pure functions that turn schedule terms into an ordered entry plan.

Architecture position
---------------------
**Modules layer** -- pure helpers.  No I/O, no session, no clock.

Invariants enforced
-------------------
* The plan sums exactly to the principal: every entry but the last gets
  ``principal / term`` truncated to 0.01, the last entry absorbs the rest.
* Due dates are stepped from the start date (never chained), one period
  apart, the first one period after the start date.
* All amounts are ``Decimal`` -- NEVER ``float``.

Failure modes
-------------
* ``term <= 0``, ``principal <= 0`` or a per-period amount that truncates
  to zero  -> ``ValidationError``.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from recognition_kernel.db.types import ZERO, round_money, round_money_down
from recognition_kernel.domain.calendar import PeriodUnit, add_periods
from recognition_kernel.exceptions import ValidationError
from recognition_modules.amortization.models import EntryPlanLine


def validate_terms(principal: Decimal, term: int) -> None:
    """Raise ``ValidationError`` unless the terms can produce a plan."""
    if isinstance(term, bool) or not isinstance(term, int) or term <= 0:
        raise ValidationError("term", f"must be a positive integer, got {term!r}")
    if not isinstance(principal, Decimal):
        raise ValidationError("principal", f"must be a Decimal, got {type(principal).__name__}")
    if principal <= ZERO:
        raise ValidationError("principal", f"must be positive, got {principal}")
    if round_money(principal) != principal:
        raise ValidationError("principal", f"must have at most 2 decimal places, got {principal}")
    if period_amount(principal, term) <= ZERO:
        raise ValidationError(
            "principal", f"{principal} is too small to spread over {term} periods",
        )


def period_amount(principal: Decimal, term: int) -> Decimal:
    """Regular (non-final) entry amount."""
    return round_money_down(principal / term)


def schedule_end_date(start_date: date, term: int, unit: PeriodUnit) -> date:
    """Due date of the final entry."""
    return add_periods(start_date, term, unit)


def build_entry_plan(
    principal: Decimal,
    start_date: date,
    term: int,
    unit: PeriodUnit,
) -> tuple[EntryPlanLine, ...]:
    """
    Generate the ordered entry plan for a schedule.

    Preconditions:
        - terms pass ``validate_terms``.
    Postconditions:
        - ``len(plan) == term``; sequences are ``1..term``.
        - ``sum(line.amount) == principal`` exactly.
        - ``plan[0].due_date == add_periods(start_date, 1, unit)``.
    """
    validate_terms(principal, term)
    regular = period_amount(principal, term)
    last = principal - regular * (term - 1)

    lines = []
    for sequence in range(1, term + 1):
        period_start = add_periods(start_date, sequence - 1, unit)
        due_date = add_periods(start_date, sequence, unit)
        lines.append(EntryPlanLine(
            sequence=sequence,
            period_start=period_start,
            period_end=due_date - timedelta(days=1),
            due_date=due_date,
            amount=last if sequence == term else regular,
        ))
    return tuple(lines)
