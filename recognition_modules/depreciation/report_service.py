"""
Depreciation Report Service (``recognition_modules.depreciation.report_service``).

Responsibility
--------------
Builds the yearly depreciation report: reads the assets that overlap the
fiscal year, runs the calculator per asset, and sums the item figures into
the totals.

Architecture position
---------------------
**Modules layer** -- read-only.  Takes no locks.  A read transaction the
service opened itself is closed before returning so it never blocks
concurrent posting; a transaction already open on the caller's session is
left untouched.

Invariants enforced
-------------------
* Totals are the exact sums of the item figures.
* A year without qualifying assets yields an empty, zero-valued report.
* The fiscal-year convention is the one ``fiscal_year_bounds`` implements,
  shared with the calculator.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from recognition_config import CompanyConfig, get_company_config
from recognition_kernel.db.types import ZERO, round_money
from recognition_kernel.domain.calendar import fiscal_year_bounds
from recognition_kernel.logging_config import get_logger
from recognition_modules.depreciation.helpers import compute
from recognition_modules.depreciation.models import (
    DepreciationReport,
    DepreciationReportItem,
    FixedAsset,
)
from recognition_modules.depreciation.selectors import AssetSelector

logger = get_logger("modules.depreciation.report_service")


def build_report(
    year: int,
    assets: list[FixedAsset],
    config: CompanyConfig,
) -> DepreciationReport:
    """Pure aggregation of calculator output into a report."""
    fy_start, fy_end = fiscal_year_bounds(year, config.fiscal_year_start_month)

    items = []
    for asset in sorted(assets, key=lambda a: a.code):
        figures = compute(asset, year, config.fiscal_year_start_month)
        if figures is None:
            continue
        items.append(DepreciationReportItem(
            asset_code=asset.code,
            asset_name=asset.name,
            category_name=asset.category_name,
            purchase_date=asset.purchase_date,
            purchase_cost=round_money(asset.purchase_cost),
            useful_life_years=asset.useful_life_years,
            depreciation_method=asset.depreciation_method,
            status=asset.status,
            depreciation_this_year=figures.depreciation_this_year,
            accumulated_depreciation=figures.accumulated_depreciation,
            book_value=figures.book_value,
        ))

    return DepreciationReport(
        year=year,
        fiscal_year_start=fy_start,
        fiscal_year_end=fy_end,
        currency_code=config.currency_code,
        items=tuple(items),
        total_purchase_cost=sum((i.purchase_cost for i in items), ZERO),
        total_depreciation_this_year=sum((i.depreciation_this_year for i in items), ZERO),
        total_accumulated_depreciation=sum((i.accumulated_depreciation for i in items), ZERO),
        total_book_value=sum((i.book_value for i in items), ZERO),
    )


class DepreciationReportService:
    """Yearly depreciation report over the asset register."""

    def __init__(self, session: Session, config: CompanyConfig | None = None):
        self._session = session
        self._config = config if config is not None else get_company_config()
        self._assets = AssetSelector(session)

    def generate_report(self, year: int) -> DepreciationReport:
        fy_start, fy_end = fiscal_year_bounds(year, self._config.fiscal_year_start_month)
        owns_transaction = not self._session.in_transaction()
        try:
            assets = self._assets.find_for_period(fy_start, fy_end)
        finally:
            if owns_transaction:
                self._session.rollback()

        report = build_report(year, assets, self._config)
        logger.info("depreciation_report_generated", extra={
            "year": year,
            "fiscal_year_start": fy_start.isoformat(),
            "fiscal_year_end": fy_end.isoformat(),
            "item_count": len(report.items),
            "total_depreciation_this_year": str(report.total_depreciation_this_year),
        })
        return report
