"""
Depreciation Domain Models.

The nouns of depreciation reporting: fixed assets as the engine reads them,
per-asset yearly figures, and the yearly report.  Report objects are
recomputed on every request and carry no identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID


class DepreciationMethod(Enum):
    """Supported depreciation methods."""
    STRAIGHT_LINE = "straight_line"
    DECLINING_BALANCE = "declining_balance"  # double-declining, rate 2 / life


class AssetStatus(Enum):
    """Asset states the engine distinguishes."""
    ACTIVE = "active"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class AssetCategory:
    """A category for grouping assets."""
    id: UUID
    code: str
    name: str


@dataclass(frozen=True)
class FixedAsset:
    """A fixed asset, with only the fields depreciation needs."""
    id: UUID
    code: str
    name: str
    purchase_date: date
    purchase_cost: Decimal
    useful_life_years: int
    depreciation_method: DepreciationMethod
    salvage_value: Decimal = Decimal("0")
    status: AssetStatus = AssetStatus.ACTIVE
    disposal_date: date | None = None
    category_id: UUID | None = None
    category_name: str | None = None


@dataclass(frozen=True)
class DepreciationFigures:
    """One asset's figures for one fiscal year."""
    depreciation_this_year: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal


@dataclass(frozen=True)
class DepreciationReportItem:
    """One report line."""
    asset_code: str
    asset_name: str
    category_name: str | None
    purchase_date: date
    purchase_cost: Decimal
    useful_life_years: int
    depreciation_method: DepreciationMethod
    status: AssetStatus
    depreciation_this_year: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal


@dataclass(frozen=True)
class DepreciationReport:
    """Yearly depreciation report.  Totals are sums of the item figures."""
    year: int
    fiscal_year_start: date
    fiscal_year_end: date
    currency_code: str
    items: tuple[DepreciationReportItem, ...] = field(default_factory=tuple)
    total_purchase_cost: Decimal = Decimal("0")
    total_depreciation_this_year: Decimal = Decimal("0")
    total_accumulated_depreciation: Decimal = Decimal("0")
    total_book_value: Decimal = Decimal("0")

    @property
    def is_empty(self) -> bool:
        return not self.items
