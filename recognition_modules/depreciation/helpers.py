"""
Depreciation Helpers (``recognition_modules.depreciation.helpers``).

Responsibility
--------------
Pure calculation of one asset's depreciation figures for one fiscal year
under straight-line or double-declining-balance.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no clock,
no database access.  Called by ``DepreciationReportService`` or from tests.

Invariants enforced
-------------------
* All numeric inputs and outputs use ``Decimal`` -- NEVER ``float``.
* Each year's amount is quantized to 0.01 (half-up); accumulated
  depreciation is the sum of the rounded yearly amounts.
* Book value never drops below salvage value.
* The purchase year (and a disposal year) is pro-rated by whole months:
  purchase month through fiscal-year end, or fiscal-year start through
  disposal month.

Failure modes
-------------
* Zero or negative useful life  -> zero depreciation every year.
* Asset purchased after the fiscal year, or disposed before it
  -> ``None`` (not part of that year).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from recognition_kernel.db.types import ZERO, round_money
from recognition_kernel.domain.calendar import (
    fiscal_year_bounds,
    fiscal_year_of,
    months_inclusive,
)
from recognition_modules.depreciation.models import (
    AssetStatus,
    DepreciationFigures,
    DepreciationMethod,
    FixedAsset,
)

DECLINING_BALANCE_FACTOR = Decimal("2")
MONTHS_PER_YEAR = 12


def straight_line(cost: Decimal, salvage_value: Decimal, useful_life_years: int) -> Decimal:
    """
    Full-year straight-line depreciation, unrounded.

    Returns ``Decimal("0")`` if ``useful_life_years`` <= 0.
    """
    if useful_life_years <= 0:
        return ZERO
    return (cost - salvage_value) / useful_life_years


def declining_balance(opening_book_value: Decimal, useful_life_years: int) -> Decimal:
    """
    Full-year double-declining-balance depreciation, unrounded.

    Rate = 2 / useful_life_years applied to the opening book value.  No
    switch to straight-line; the salvage cap is applied by the caller.
    """
    if useful_life_years <= 0:
        return ZERO
    return opening_book_value * DECLINING_BALANCE_FACTOR / useful_life_years


def full_year_amount(asset: FixedAsset, opening_book_value: Decimal) -> Decimal:
    if asset.depreciation_method is DepreciationMethod.DECLINING_BALANCE:
        return declining_balance(opening_book_value, asset.useful_life_years)
    return straight_line(asset.purchase_cost, asset.salvage_value, asset.useful_life_years)


def last_depreciation_day(asset: FixedAsset, fiscal_year_end: date) -> date | None:
    """
    Last day the asset depreciates within a year ending *fiscal_year_end*.

    ``None`` for a disposed asset without a disposal date.
    """
    if asset.status is AssetStatus.DISPOSED:
        if asset.disposal_date is None:
            return None
        return min(asset.disposal_date, fiscal_year_end)
    return fiscal_year_end


def compute(
    asset: FixedAsset,
    year: int,
    fiscal_start_month: int = 1,
) -> DepreciationFigures | None:
    """
    Depreciation figures for *asset* in fiscal *year*.

    Preconditions:
        - ``fiscal_start_month`` in 1..12.
    Postconditions:
        - ``None`` when the asset has no overlap with the fiscal year.
        - ``book_value == round_money(purchase_cost) - accumulated_depreciation``.
        - ``book_value >= salvage_value`` whenever cost >= salvage.
    """
    fy_start, fy_end = fiscal_year_bounds(year, fiscal_start_month)
    if asset.purchase_date > fy_end:
        return None
    stop = last_depreciation_day(asset, fy_end)
    if stop is None or stop < fy_start:
        return None

    floor = round_money(asset.salvage_value)
    book_value = round_money(asset.purchase_cost)
    accumulated = ZERO
    this_year = ZERO

    first_year = fiscal_year_of(asset.purchase_date, fiscal_start_month)
    for current in range(first_year, year + 1):
        start, end = fiscal_year_bounds(current, fiscal_start_month)
        months = months_inclusive(max(start, asset.purchase_date), min(end, stop))
        amount = round_money(
            full_year_amount(asset, book_value) * months / MONTHS_PER_YEAR
        )
        amount = max(min(amount, book_value - floor), ZERO)
        accumulated += amount
        book_value -= amount
        this_year = amount

    return DepreciationFigures(
        depreciation_this_year=this_year,
        accumulated_depreciation=round_money(accumulated),
        book_value=round_money(book_value),
    )
