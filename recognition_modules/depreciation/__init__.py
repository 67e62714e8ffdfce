"""
Depreciation Module.

Straight-line and double-declining-balance depreciation per asset per
fiscal year, aggregated into a yearly report.
"""

from recognition_modules.depreciation.helpers import compute
from recognition_modules.depreciation.models import (
    AssetCategory,
    AssetStatus,
    DepreciationFigures,
    DepreciationMethod,
    DepreciationReport,
    DepreciationReportItem,
    FixedAsset,
)
from recognition_modules.depreciation.report_service import (
    DepreciationReportService,
    build_report,
)
from recognition_modules.depreciation.selectors import AssetSelector

__all__ = [
    "AssetCategory",
    "AssetSelector",
    "AssetStatus",
    "DepreciationFigures",
    "DepreciationMethod",
    "DepreciationReport",
    "DepreciationReportItem",
    "DepreciationReportService",
    "FixedAsset",
    "build_report",
    "compute",
]
